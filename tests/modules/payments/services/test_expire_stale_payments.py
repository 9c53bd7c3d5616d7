# backend/tests/modules/payments/services/test_expire_stale_payments.py
# -*- coding: utf-8 -*-
"""
ReconciliationService.expire_stale_payments: sesiones abandonadas.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.facades.checkout import start_checkout
from app.modules.payments.models import Payment
from app.modules.payments.repositories import PaymentRepository

pytestmark = pytest.mark.usefixtures("courses")

LATER = datetime.now(timezone.utc) + timedelta(minutes=45)


async def _status(session_factory, payment_id):
    async with session_factory() as session:
        payment = await session.get(Payment, payment_id)
        return payment.status, payment.payment_metadata


@pytest.mark.asyncio
async def test_stale_payment_is_expired_at_processor_and_canceled(
    db, session_factory, gateway, payments_settings, engine_service
):
    started = await start_checkout(db, user_id=1, course_id=7, gateway=gateway, settings=payments_settings)

    expired = await engine_service.expire_stale_payments(db, gateway=gateway, now=LATER)

    assert expired == 1
    assert gateway.expired == [started.session_id]
    status, metadata = await _status(session_factory, started.payment_id)
    assert status == PaymentStatus.CANCELED
    assert metadata["canceled_by"] == "expired"


@pytest.mark.asyncio
async def test_recent_payment_is_kept(db, session_factory, gateway, payments_settings, engine_service):
    started = await start_checkout(db, user_id=1, course_id=7, gateway=gateway, settings=payments_settings)

    assert await engine_service.expire_stale_payments(db, gateway=gateway) == 0
    status, _ = await _status(session_factory, started.payment_id)
    assert status == PaymentStatus.CREATED


@pytest.mark.asyncio
async def test_processor_rejection_leaves_payment_created(
    db, session_factory, gateway, payments_settings, engine_service
):
    started = await start_checkout(db, user_id=1, course_id=7, gateway=gateway, settings=payments_settings)
    gateway.reject_expire.add(started.session_id)

    assert await engine_service.expire_stale_payments(db, gateway=gateway, now=LATER) == 0
    status, _ = await _status(session_factory, started.payment_id)
    assert status == PaymentStatus.CREATED


@pytest.mark.asyncio
async def test_pending_payments_are_not_expired(db, session_factory, gateway, payments_settings, engine_service):
    started = await start_checkout(db, user_id=1, course_id=7, gateway=gateway, settings=payments_settings)
    await PaymentRepository().transition(db, started.payment_id, [PaymentStatus.CREATED], PaymentStatus.PENDING)
    await db.commit()

    assert await engine_service.expire_stale_payments(db, now=LATER) == 0
    status, _ = await _status(session_factory, started.payment_id)
    assert status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_without_gateway_cancels_locally(db, gateway, payments_settings, engine_service):
    await start_checkout(db, user_id=1, course_id=7, gateway=gateway, settings=payments_settings)
    await start_checkout(db, user_id=2, course_id=7, gateway=gateway, settings=payments_settings)

    assert await engine_service.expire_stale_payments(db, older_than_minutes=10, now=LATER) == 2
    assert gateway.expired == []
    assert await PaymentRepository().find_active(db, 1, 7) is None
