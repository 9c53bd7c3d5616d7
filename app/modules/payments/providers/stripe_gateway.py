# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/providers/stripe_gateway.py

Cliente del procesador de pagos (Stripe) para el checkout de cursos.

Operaciones:
- create_checkout_session: crea una Checkout Session con clave idempotente
- retrieve_session: consulta en vivo el estado de una sesión
- verify_webhook_signature: valida Stripe-Signature sobre el body crudo
- create_refund: reembolso total o parcial de un PaymentIntent

Las llamadas del SDK son bloqueantes: se ejecutan en threadpool para no
bloquear el event loop. Cualquier StripeError se traduce a
GatewayUnavailableError (reintentable).

Autor: CourseHub
Fecha: 2026-09-05
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.payments.errors import (
    GatewayUnavailableError,
    InvalidAmountError,
    InvalidSignatureError,
    NotCancelableError,
    RefundExceedsCapturedError,
)

logger = logging.getLogger(__name__)

# Motivos que Stripe acepta en Refund.reason
STRIPE_REFUND_REASONS = frozenset({"duplicate", "fraudulent", "requested_by_customer"})


def to_minor_units(amount: Decimal) -> int:
    """99.99 -> 9999 (redondeo half-up a centavos)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: Optional[int]) -> Optional[Decimal]:
    if amount is None:
        return None
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


@dataclass
class CheckoutSessionResult:
    """Resultado de crear una sesión de checkout."""
    session_id: str
    redirect_url: str
    provider: str = "stripe"


@dataclass
class GatewaySessionState:
    """Estado en vivo de una Checkout Session."""
    session_id: str
    status: Optional[str]
    payment_status: Optional[str]
    amount_total: Optional[int]
    currency: Optional[str]
    customer_email: Optional[str] = None
    payment_intent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "amount_total": self.amount_total,
            "currency": self.currency,
            "customer_email": self.customer_email,
        }


@dataclass
class RefundResult:
    refund_id: str
    status: str
    amount: Decimal


class StripeGateway:
    """Adaptador del SDK de Stripe para cursos."""

    def __init__(self, settings: Optional[PaymentsSettings] = None):
        self._settings = settings or get_payments_settings()

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.stripe_secret_key)

    def _require_api_key(self) -> str:
        key = self._settings.stripe_secret_key
        if not key:
            logger.error("STRIPE_SECRET_KEY not configured")
            raise GatewayUnavailableError("Payment processor is not configured")
        return key

    # -----------------------------------------------------------------
    # Checkout
    # -----------------------------------------------------------------
    async def create_checkout_session(
        self,
        *,
        amount: Decimal,
        currency: str,
        course_title: str,
        metadata: Dict[str, Any],
        idempotency_key: str,
        customer_email: Optional[str] = None,
    ) -> CheckoutSessionResult:
        """
        Crea una Checkout Session de pago único.

        metadata debe incluir user_id y course_id; se copia también al
        PaymentIntent para poder correlacionar payment_intent.* eventos.
        """
        api_key = self._require_api_key()
        frontend = self._settings.frontend_url

        str_metadata = {k: str(v) for k, v in metadata.items()}
        str_metadata["idempotency_key"] = idempotency_key

        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": currency.lower(),
                        "unit_amount": to_minor_units(amount),
                        "product_data": {"name": course_title},
                    },
                    "quantity": 1,
                }
            ],
            "success_url": f"{frontend}/payment/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{frontend}/payment/cancel",
            "metadata": str_metadata,
            "payment_intent_data": {"metadata": str_metadata},
            "client_reference_id": str_metadata.get("user_id"),
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.create,
                api_key=api_key,
                idempotency_key=idempotency_key,
                **params,
            )
        except stripe.StripeError as e:
            logger.error(
                "Stripe checkout session creation failed key=%s: %s",
                idempotency_key[:8] + "...",
                e,
            )
            raise GatewayUnavailableError() from e

        logger.info(
            "Stripe checkout session created: session_id=%s user=%s course=%s",
            session.id,
            str_metadata.get("user_id"),
            str_metadata.get("course_id"),
        )
        return CheckoutSessionResult(session_id=session.id, redirect_url=session.url)

    async def retrieve_session(self, session_id: str) -> GatewaySessionState:
        api_key = self._require_api_key()
        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.retrieve,
                session_id,
                api_key=api_key,
            )
        except stripe.StripeError as e:
            logger.warning("Stripe session retrieve failed session_id=%s: %s", session_id, e)
            raise GatewayUnavailableError() from e

        details = session.get("customer_details") or {}
        return GatewaySessionState(
            session_id=session.id,
            status=session.get("status"),
            payment_status=session.get("payment_status"),
            amount_total=session.get("amount_total"),
            currency=session.get("currency"),
            customer_email=details.get("email") if details else None,
            payment_intent_id=session.get("payment_intent"),
        )

    async def expire_session(self, session_id: str) -> None:
        """
        Expira una sesión abierta.

        Raises:
            NotCancelableError: Stripe rechaza la sesión (ya completada o
                expirada); el pago se concilia por webhook.
            GatewayUnavailableError: error de red o del procesador.
        """
        api_key = self._require_api_key()
        try:
            await run_in_threadpool(
                stripe.checkout.Session.expire,
                session_id,
                api_key=api_key,
            )
        except stripe.InvalidRequestError as e:
            logger.info("Stripe session expire rejected session_id=%s: %s", session_id, e)
            raise NotCancelableError("Checkout session is no longer open", session_id=session_id) from e
        except stripe.StripeError as e:
            logger.warning("Stripe session expire failed session_id=%s: %s", session_id, e)
            raise GatewayUnavailableError() from e
        logger.info("Stripe checkout session expired: session_id=%s", session_id)

    # -----------------------------------------------------------------
    # Webhooks
    # -----------------------------------------------------------------
    def verify_webhook_signature(
        self,
        raw_body: bytes,
        signature_header: Optional[str],
    ) -> Dict[str, Any]:
        """
        Verifica la firma y devuelve el evento como dict.

        Raises:
            InvalidSignatureError: header o secret ausentes, firma
                inválida, timestamp fuera de tolerancia o body no-JSON.
        """
        secret = self._settings.stripe_webhook_secret
        if not secret:
            logger.error("STRIPE_WEBHOOK_SECRET not configured; rejecting webhook")
            raise InvalidSignatureError("Webhook secret not configured")
        if not signature_header:
            raise InvalidSignatureError("Missing Stripe-Signature header")

        try:
            stripe.Webhook.construct_event(
                raw_body,
                signature_header,
                secret,
                tolerance=self._settings.stripe_webhook_tolerance_seconds,
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Stripe webhook signature invalid: %s", e)
            raise InvalidSignatureError() from e
        except ValueError as e:
            logger.warning("Stripe webhook payload is not valid JSON: %s", e)
            raise InvalidSignatureError("Invalid webhook payload") from e

        return json.loads(raw_body)

    # -----------------------------------------------------------------
    # Reembolsos
    # -----------------------------------------------------------------
    async def create_refund(
        self,
        *,
        payment_intent_id: Optional[str],
        amount: Decimal,
        captured_amount: Decimal,
        reason: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RefundResult:
        if amount <= 0:
            raise InvalidAmountError("Refund amount must be positive")
        if amount > captured_amount:
            raise RefundExceedsCapturedError(
                amount=str(amount),
                captured=str(captured_amount),
            )
        if not payment_intent_id:
            raise GatewayUnavailableError("Payment has no processor reference to refund")

        api_key = self._require_api_key()
        refund_metadata = {k: str(v) for k, v in (metadata or {}).items()}
        reason = reason or self._settings.default_refund_reason
        params: Dict[str, Any] = {
            "payment_intent": payment_intent_id,
            "amount": to_minor_units(amount),
        }
        if reason in STRIPE_REFUND_REASONS:
            params["reason"] = reason
        else:
            refund_metadata["reason"] = reason
        if refund_metadata:
            params["metadata"] = refund_metadata

        try:
            refund = await run_in_threadpool(stripe.Refund.create, api_key=api_key, **params)
        except stripe.StripeError as e:
            logger.error("Stripe refund failed payment_intent=%s: %s", payment_intent_id, e)
            raise GatewayUnavailableError() from e

        logger.info(
            "Stripe refund created: refund_id=%s payment_intent=%s amount=%s status=%s",
            refund.id,
            payment_intent_id,
            amount,
            refund.status,
        )
        return RefundResult(
            refund_id=refund.id,
            status=refund.status,
            amount=from_minor_units(refund.amount) or amount,
        )


_gateway: Optional[StripeGateway] = None


def get_stripe_gateway() -> StripeGateway:
    """Dependencia FastAPI: instancia compartida del gateway."""
    global _gateway
    if _gateway is None:
        _gateway = StripeGateway()
    return _gateway


__all__ = [
    "CheckoutSessionResult",
    "GatewaySessionState",
    "RefundResult",
    "StripeGateway",
    "get_stripe_gateway",
    "to_minor_units",
    "from_minor_units",
]

# Fin del archivo backend/app/modules/payments/providers/stripe_gateway.py
