# backend/tests/modules/payments/conftest.py
# -*- coding: utf-8 -*-
"""
Fixtures del módulo Payments.

- gateway: FakeStripeGateway sin red (la verificación de firma es la real)
- engine_service: ReconciliationService con settings de prueba
- app / client: AsyncClient contra la app con dependencias sustituidas
"""

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from app.modules.payments.services.notification_service import wait_for_pending_notifications
from app.modules.payments.services.reconciliation_service import ReconciliationService
from tests.modules.payments.stripe_helpers import FakeStripeGateway


@pytest.fixture
def gateway(payments_settings) -> FakeStripeGateway:
    return FakeStripeGateway(payments_settings)


@pytest.fixture
async def engine_service(payments_settings):
    service = ReconciliationService(settings=payments_settings)
    yield service
    await wait_for_pending_notifications(timeout=2.0)


@pytest.fixture
def app(session_factory, gateway, engine_service, payments_settings):
    from app.main import app as fastapi_app
    from app.shared.database.database import get_async_session
    from app.modules.payments.dependencies import (
        get_reconciliation_service,
        get_settings_dep,
        get_stripe_gateway,
    )

    async def _session_override():
        async with session_factory() as session:
            try:
                yield session
            finally:
                if session.in_transaction():
                    await session.rollback()

    fastapi_app.dependency_overrides[get_async_session] = _session_override
    fastapi_app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[get_reconciliation_service] = lambda: engine_service
    fastapi_app.dependency_overrides[get_settings_dep] = lambda: payments_settings

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
