# backend/tests/modules/payments/routes/test_refund_and_status_routes.py
# -*- coding: utf-8 -*-
"""
Reembolso administrativo, estado de checkout e historial.
"""

from decimal import Decimal

import pytest

from tests.modules.payments.stripe_helpers import bearer, checkout_completed, encode_event, sign_payload

pytestmark = pytest.mark.usefixtures("courses")


async def _paid_payment(client, user_id=1):
    started = (await client.post("/api/payments/checkout/7", headers=bearer(user_id))).json()
    payload = encode_event(checkout_completed(started["session_id"]))
    response = await client.post(
        "/api/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": sign_payload(payload, "whsec_test_coursehub")},
    )
    assert response.json()["status"] == "ok"
    return started


# -----------------------------------------------------------------------------
# Reembolsos
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_refund_requires_admin(client):
    started = await _paid_payment(client)

    response = await client.post(f"/api/payments/admin/refund/{started['payment_id']}", headers=bearer(1))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_partial_then_full_refund(client, gateway):
    started = await _paid_payment(client)
    url = f"/api/payments/admin/refund/{started['payment_id']}"
    admin = bearer(100, admin=True)

    partial = await client.post(url, json={"amount": "40.00", "reason": "requested_by_customer"}, headers=admin)
    assert partial.status_code == 200
    body = partial.json()
    assert body["full_refund"] is False
    assert body["status"] == "succeeded"
    assert body["refund_id"] == "re_test_1"

    rest = await client.post(url, headers=admin)
    assert rest.status_code == 200
    body = rest.json()
    assert body["full_refund"] is True
    assert body["status"] == "refunded"
    assert gateway.refunds[1]["amount"] == Decimal("59.99")

    again = await client.post(url, headers=admin)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_TRANSITION"


@pytest.mark.asyncio
async def test_refund_above_captured_amount(client):
    started = await _paid_payment(client)

    response = await client.post(
        f"/api/payments/admin/refund/{started['payment_id']}",
        json={"amount": "150.00"},
        headers=bearer(100, admin=True),
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "REFUND_EXCEEDS_CAPTURED"


@pytest.mark.asyncio
async def test_refund_of_unpaid_payment_is_invalid_transition(client):
    started = (await client.post("/api/payments/checkout/7", headers=bearer(1))).json()

    response = await client.post(
        f"/api/payments/admin/refund/{started['payment_id']}",
        headers=bearer(100, admin=True),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_refund_unknown_payment(client):
    response = await client.post("/api/payments/admin/refund/999", headers=bearer(100, admin=True))
    assert response.status_code == 404


# -----------------------------------------------------------------------------
# Estado e historial
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_status_combines_ledger_and_gateway(client):
    started = await _paid_payment(client)

    response = await client.get(f"/api/payments/status/{started['session_id']}", headers=bearer(1))

    assert response.status_code == 200
    body = response.json()
    assert body["payment"]["status"] == "succeeded"
    assert body["enrollment_status"] == "active"
    assert body["enrollment_payment_status"] == "paid"
    assert body["gateway"]["session_id"] == started["session_id"]


@pytest.mark.asyncio
async def test_status_without_gateway_returns_ledger_only(client, gateway):
    started = (await client.post("/api/payments/checkout/7", headers=bearer(1))).json()
    gateway.unavailable = True

    response = await client.get(f"/api/payments/status/{started['session_id']}", headers=bearer(1))

    assert response.status_code == 200
    assert response.json()["gateway"] is None
    assert response.json()["payment"]["status"] == "created"


@pytest.mark.asyncio
async def test_status_of_other_users_session_is_not_found(client):
    started = (await client.post("/api/payments/checkout/7", headers=bearer(1))).json()

    response = await client.get(f"/api/payments/status/{started['session_id']}", headers=bearer(2))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_history_filters_and_paginates(client):
    await _paid_payment(client)
    await client.post("/api/payments/checkout/7", headers=bearer(2))

    response = await client.get("/api/payments/history", params={"limit": 1}, headers=bearer(1))
    body = response.json()
    assert response.status_code == 200
    assert body["meta"]["total"] == 1
    assert body["meta"]["limit"] == 1
    assert body["items"][0]["status"] == "succeeded"

    filtered = await client.get("/api/payments/history", params={"status": "failed"}, headers=bearer(1))
    assert filtered.json()["meta"]["total"] == 0

    invalid = await client.get("/api/payments/history", params={"status": "bogus"}, headers=bearer(1))
    assert invalid.status_code == 422


# -----------------------------------------------------------------------------
# Listado administrativo
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_admin_listing_filters_by_user_course_and_status(client):
    await _paid_payment(client, user_id=1)
    await client.post("/api/payments/checkout/7", headers=bearer(2))
    await client.post("/api/payments/checkout/10", headers=bearer(1))
    admin = bearer(100, admin=True)

    everything = await client.get("/api/payments/admin/all", headers=admin)
    body = everything.json()
    assert everything.status_code == 200
    assert body["success"] is True
    assert body["meta"]["total"] == 3
    assert {item["user_id"] for item in body["items"]} == {1, 2}

    by_course = await client.get("/api/payments/admin/all", params={"course_id": 7}, headers=admin)
    assert by_course.json()["meta"]["total"] == 2

    paid = await client.get(
        "/api/payments/admin/all",
        params={"user_id": 1, "status": "succeeded"},
        headers=admin,
    )
    items = paid.json()["items"]
    assert len(items) == 1
    assert items[0]["course_id"] == 7
    assert items[0]["external_payment_intent_id"] == "pi_test_1"

    page = await client.get("/api/payments/admin/all", params={"limit": 1, "offset": 1}, headers=admin)
    meta = page.json()["meta"]
    assert len(page.json()["items"]) == 1
    assert (meta["page"], meta["pages"]) == (2, 3)


@pytest.mark.asyncio
async def test_admin_listing_requires_admin(client):
    anonymous = await client.get("/api/payments/admin/all")
    student = await client.get("/api/payments/admin/all", headers=bearer(1))

    assert anonymous.status_code == 401
    assert student.status_code == 403
