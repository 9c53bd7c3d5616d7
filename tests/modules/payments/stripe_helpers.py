# backend/tests/modules/payments/stripe_helpers.py
# -*- coding: utf-8 -*-
"""
Dobles de prueba del procesador y constructores de webhooks firmados.
"""

import asyncio
import hashlib
import hmac
import itertools
import json
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.modules.auth.security import create_access_token
from app.modules.payments.errors import (
    GatewayUnavailableError,
    NotCancelableError,
    RefundExceedsCapturedError,
)
from app.modules.payments.providers.stripe_gateway import (
    CheckoutSessionResult,
    GatewaySessionState,
    RefundResult,
    StripeGateway,
    to_minor_units,
)


class FakeStripeGateway(StripeGateway):
    def __init__(self, settings):
        super().__init__(settings)
        self._ids = itertools.count(1)
        self.sessions_by_key: Dict[str, CheckoutSessionResult] = {}
        self.checkout_calls: List[Dict[str, Any]] = []
        self.expired: List[str] = []
        self.refunds: List[Dict[str, Any]] = []
        self.reject_expire: set[str] = set()
        self.unavailable = False

    async def create_checkout_session(self, *, amount, currency, course_title, metadata, idempotency_key, customer_email=None):
        await asyncio.sleep(0)
        if self.unavailable:
            raise GatewayUnavailableError()
        self.checkout_calls.append(
            {
                "amount": amount,
                "currency": currency,
                "course_title": course_title,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
                "customer_email": customer_email,
            }
        )
        if idempotency_key not in self.sessions_by_key:
            session_id = f"cs_test_{next(self._ids)}"
            self.sessions_by_key[idempotency_key] = CheckoutSessionResult(
                session_id=session_id,
                redirect_url=f"https://checkout.stripe.test/c/pay/{session_id}",
            )
        return self.sessions_by_key[idempotency_key]

    async def retrieve_session(self, session_id):
        if self.unavailable:
            raise GatewayUnavailableError()
        return GatewaySessionState(
            session_id=session_id,
            status="open",
            payment_status="unpaid",
            amount_total=9999,
            currency="usd",
        )

    async def expire_session(self, session_id):
        if self.unavailable:
            raise GatewayUnavailableError()
        if session_id in self.reject_expire:
            raise NotCancelableError("Checkout session is no longer open", session_id=session_id)
        self.expired.append(session_id)

    async def create_refund(self, *, payment_intent_id, amount, captured_amount, reason=None, metadata=None):
        if amount > captured_amount:
            raise RefundExceedsCapturedError(amount=str(amount), captured=str(captured_amount))
        refund_id = f"re_test_{len(self.refunds) + 1}"
        self.refunds.append(
            {
                "refund_id": refund_id,
                "payment_intent_id": payment_intent_id,
                "amount": amount,
                "reason": reason,
                "metadata": metadata,
            }
        )
        return RefundResult(refund_id=refund_id, status="succeeded", amount=amount)


_event_ids = itertools.count(1)


def stripe_event(event_type: str, obj: Dict[str, Any], event_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": event_id or f"evt_test_{next(_event_ids)}",
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "livemode": False,
        "data": {"object": obj},
    }


def checkout_completed(
    session_id: str,
    *,
    amount: Decimal = Decimal("99.99"),
    payment_status: str = "paid",
    payment_intent: str = "pi_test_1",
    email: Optional[str] = "ana@example.com",
    event_id: Optional[str] = None,
    event_type: str = "checkout.session.completed",
) -> Dict[str, Any]:
    return stripe_event(
        event_type,
        {
            "id": session_id,
            "object": "checkout.session",
            "status": "complete",
            "payment_status": payment_status,
            "payment_intent": payment_intent,
            "amount_total": to_minor_units(amount),
            "currency": "usd",
            "customer_details": {"email": email},
            "metadata": {},
        },
        event_id=event_id,
    )


def sign_payload(payload: bytes, secret: str, timestamp: Optional[int] = None) -> str:
    ts = timestamp or int(time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={signature}"


def encode_event(event: Dict[str, Any]) -> bytes:
    return json.dumps(event).encode("utf-8")


def bearer(user_id: int, *, admin: bool = False, email: Optional[str] = None) -> Dict[str, str]:
    extra: Dict[str, Any] = {}
    if admin:
        extra["role"] = "admin"
    if email:
        extra["email"] = email
    return {"Authorization": f"Bearer {create_access_token(user_id, **extra)}"}


