# backend/tests/modules/payments/routes/test_checkout_routes.py
# -*- coding: utf-8 -*-
"""
Rutas /api/payments/checkout: autenticación, respuesta y envoltura de errores.
"""

import pytest

from tests.modules.payments.stripe_helpers import bearer

pytestmark = pytest.mark.usefixtures("courses")


@pytest.mark.asyncio
async def test_checkout_requires_auth(client):
    response = await client.post("/api/payments/checkout/7")
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_checkout_returns_session_and_resumes(client, gateway):
    headers = bearer(1, email="ana@example.com")

    first = await client.post("/api/payments/checkout/7", headers=headers)
    second = await client.post("/api/payments/checkout/7", headers=headers)

    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["session_id"] == "cs_test_1"
    assert body["status"] == "created"
    assert body["resumed"] is False
    assert gateway.checkout_calls[0]["customer_email"] == "ana@example.com"

    assert second.json()["resumed"] is True
    assert second.json()["payment_id"] == body["payment_id"]


@pytest.mark.asyncio
async def test_free_course_enrolls_directly(client, courses):
    response = await client.post(f"/api/payments/checkout/{courses['free']}", headers=bearer(2))

    assert response.status_code == 200
    body = response.json()
    assert body["free"] is True
    assert body["status"] == "enrolled"
    assert body["enrollment_id"] is not None


@pytest.mark.asyncio
async def test_inactive_course_returns_error_envelope(client, courses):
    response = await client.post(f"/api/payments/checkout/{courses['inactive']}", headers=bearer(1))

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INVALID_COURSE"


@pytest.mark.asyncio
async def test_gateway_outage_is_retryable(client, gateway):
    gateway.unavailable = True

    response = await client.post("/api/payments/checkout/7", headers=bearer(1))

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "5"
    assert response.json()["error"]["retryable"] is True


@pytest.mark.asyncio
async def test_cancel_then_not_cancelable(client):
    headers = bearer(1)
    started = (await client.post("/api/payments/checkout/7", headers=headers)).json()

    canceled = await client.post("/api/payments/checkout/7/cancel", headers=headers)
    assert canceled.status_code == 200
    assert canceled.json() == {"success": True, "payment_id": started["payment_id"], "status": "canceled"}

    again = await client.post("/api/payments/checkout/7/cancel", headers=headers)
    assert again.status_code == 404
    assert again.json()["error"]["code"] == "PAYMENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_cancel_of_paid_session_is_conflict(client, gateway):
    headers = bearer(1)
    started = (await client.post("/api/payments/checkout/7", headers=headers)).json()
    gateway.reject_expire.add(started["session_id"])

    response = await client.post("/api/payments/checkout/7/cancel", headers=headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "NOT_CANCELABLE"
    assert gateway.expired == []
