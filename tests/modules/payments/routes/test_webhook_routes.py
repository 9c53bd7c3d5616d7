# backend/tests/modules/payments/routes/test_webhook_routes.py
# -*- coding: utf-8 -*-
"""
POST /api/payments/webhook: firma real de Stripe sobre el body crudo.
"""

import pytest

from app.modules.enrollments.enums import EnrollmentStatus
from app.modules.enrollments.repositories import EnrollmentRepository
from tests.modules.payments.stripe_helpers import bearer, checkout_completed, encode_event, sign_payload

pytestmark = pytest.mark.usefixtures("courses")

WEBHOOK_URL = "/api/payments/webhook"


def _signed(event, secret="whsec_test_coursehub"):
    payload = encode_event(event)
    return payload, {"Stripe-Signature": sign_payload(payload, secret), "Content-Type": "application/json"}


@pytest.mark.asyncio
async def test_paid_webhook_enrolls_and_duplicate_is_acknowledged(client, session_factory):
    started = (await client.post("/api/payments/checkout/7", headers=bearer(1))).json()
    payload, headers = _signed(checkout_completed(started["session_id"], event_id="evt_route_1"))

    first = await client.post(WEBHOOK_URL, content=payload, headers=headers)
    duplicate = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["status"] == "ok"
    assert duplicate.status_code == 200
    assert duplicate.json()["status"] == "already_processed"

    async with session_factory() as session:
        enrollment = await EnrollmentRepository().get_by_user_course(session, 1, 7)
    assert enrollment.status == EnrollmentStatus.ACTIVE


@pytest.mark.asyncio
async def test_invalid_signature_is_rejected(client):
    payload, headers = _signed(checkout_completed("cs_test_1"), secret="whsec_wrong")

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SIGNATURE"


@pytest.mark.asyncio
async def test_missing_signature_is_rejected(client):
    response = await client.post(WEBHOOK_URL, content=encode_event(checkout_completed("cs_test_1")))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_signed_event_without_object_is_rejected(client):
    payload, headers = _signed({"id": "evt_x", "type": "checkout.session.completed", "data": {}})

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unhandled_event_type_is_acknowledged(client):
    payload, headers = _signed({"id": "evt_c", "type": "customer.created", "data": {"object": {"id": "cus_1"}}})

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"


@pytest.mark.asyncio
async def test_unexpected_failure_returns_500(client, engine_service, monkeypatch):
    async def _boom(session, event):
        raise RuntimeError("db exploded")

    monkeypatch.setattr(engine_service, "handle_event", _boom)
    payload, headers = _signed(checkout_completed("cs_test_1"))

    response = await client.post(WEBHOOK_URL, content=payload, headers=headers)

    assert response.status_code == 500
    assert response.json()["detail"] == {"error": "webhook_processing_failed"}
