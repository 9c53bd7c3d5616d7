# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/normalize.py

Normalización de eventos de webhook de Stripe.

Convierte el evento (ya verificado) a un DTO interno con los campos
que usa el motor de conciliación. Se conserva solo un subconjunto del
payload (whitelist) para auditoría en payment_events.

Autor: CourseHub
Fecha: 2026-09-07
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .constants import (
    EVENT_KINDS,
    EVENT_CHARGE_REFUNDED,
    EVENT_DISPUTE_CREATED,
    EVENT_PAYMENT_INTENT_FAILED,
    KIND_COMPLETED,
    KIND_EXPIRED,
    KIND_FAILED,
    KIND_IGNORED,
    KIND_REFUND,
    KIND_SUCCEEDED,
)

logger = logging.getLogger(__name__)

# Campos del objeto del evento que se persisten (sin PII)
AUDIT_FIELDS = (
    "id",
    "object",
    "status",
    "payment_status",
    "payment_intent",
    "amount",
    "amount_total",
    "amount_refunded",
    "currency",
    "reason",
    "created",
    "livemode",
)


class NormalizedWebhook(BaseModel):
    """DTO normalizado de un evento Stripe."""

    event_id: str = Field(description="ID único del evento (evt_...)")
    event_type: str = Field(description="Tipo de evento original")
    kind: str = Field(default=KIND_IGNORED, description="Clasificación interna del evento")

    provider_session_id: Optional[str] = Field(default=None, description="Checkout Session (cs_...)")
    provider_payment_id: Optional[str] = Field(default=None, description="PaymentIntent (pi_...)")
    session_payment_status: Optional[str] = Field(
        default=None,
        description="payment_status de la sesión (paid, unpaid, no_payment_required)",
    )

    amount_cents: Optional[int] = None
    currency: Optional[str] = None
    customer_email: Optional[str] = None

    failure_code: Optional[str] = None
    failure_reason: Optional[str] = None

    provider_refund_id: Optional[str] = None
    refund_status: Optional[str] = None
    refund_amount_cents: Optional[int] = Field(
        default=None,
        description="Monto de este refund, o acumulado si refund_is_cumulative",
    )
    refund_is_cumulative: bool = False

    dispute_reason: Optional[str] = None

    metadata_user_id: Optional[int] = None
    metadata_course_id: Optional[int] = None
    metadata_idempotency_key: Optional[str] = Field(
        default=None,
        description="Clave idempotente del intento que originó el PaymentIntent",
    )

    audit: Dict[str, Any] = Field(default_factory=dict, description="Subconjunto persistible")


class WebhookNormalizationError(ValueError):
    """Evento sin la estructura mínima de Stripe."""


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _audit_subset(event_type: str, event_id: str, obj: Dict[str, Any]) -> Dict[str, Any]:
    subset = {k: obj[k] for k in AUDIT_FIELDS if k in obj}
    subset["event_id"] = event_id
    subset["event_type"] = event_type
    return subset


def normalize_stripe_event(data: Dict[str, Any]) -> NormalizedWebhook:
    """
    Normaliza un evento Stripe a NormalizedWebhook.

    Raises:
        WebhookNormalizationError: si faltan 'id', 'type' o data.object.
    """
    if not isinstance(data, dict) or "id" not in data or "type" not in data:
        raise WebhookNormalizationError("Invalid Stripe webhook: missing 'type' or 'id'")

    event_type = data["type"]
    event_id = data["id"]
    obj = (data.get("data") or {}).get("object")
    if not isinstance(obj, dict):
        raise WebhookNormalizationError("Invalid Stripe webhook: missing data.object")

    metadata = obj.get("metadata") or {}
    result = NormalizedWebhook(
        event_id=event_id,
        event_type=event_type,
        kind=EVENT_KINDS.get(event_type, KIND_IGNORED),
        metadata_user_id=_as_int(metadata.get("user_id")),
        metadata_course_id=_as_int(metadata.get("course_id")),
        metadata_idempotency_key=metadata.get("idempotency_key") or None,
        audit=_audit_subset(event_type, event_id, obj),
    )

    if obj.get("currency"):
        result.currency = str(obj["currency"]).upper()

    if result.kind in (KIND_COMPLETED, KIND_SUCCEEDED, KIND_EXPIRED) or (
        result.kind == KIND_FAILED and event_type != EVENT_PAYMENT_INTENT_FAILED
    ):
        # Objeto Checkout Session
        result.provider_session_id = obj.get("id")
        result.provider_payment_id = obj.get("payment_intent")
        result.session_payment_status = obj.get("payment_status")
        result.amount_cents = obj.get("amount_total")
        details = obj.get("customer_details") or {}
        result.customer_email = details.get("email") or obj.get("customer_email")

    elif event_type == EVENT_PAYMENT_INTENT_FAILED:
        result.provider_payment_id = obj.get("id")
        result.amount_cents = obj.get("amount")
        last_error = obj.get("last_payment_error") or {}
        result.failure_code = last_error.get("decline_code") or last_error.get("code")
        result.failure_reason = last_error.get("message")

    elif result.kind == KIND_REFUND:
        result.provider_payment_id = obj.get("payment_intent")
        if event_type == EVENT_CHARGE_REFUNDED:
            # Objeto Charge: amount_refunded es acumulado
            result.refund_amount_cents = obj.get("amount_refunded")
            result.refund_is_cumulative = True
            result.refund_status = "succeeded" if obj.get("refunded") or obj.get("amount_refunded") else None
            refunds = (obj.get("refunds") or {}).get("data") or []
            if refunds:
                result.provider_refund_id = refunds[0].get("id")
        else:
            # Objeto Refund
            result.provider_refund_id = obj.get("id")
            result.refund_amount_cents = obj.get("amount")
            result.refund_status = obj.get("status")

    elif event_type == EVENT_DISPUTE_CREATED:
        result.provider_payment_id = obj.get("payment_intent")
        result.amount_cents = obj.get("amount")
        result.dispute_reason = obj.get("reason")

    else:
        logger.info("Stripe event type not handled, ignoring: %s (%s)", event_type, event_id)

    return result


__all__ = [
    "NormalizedWebhook",
    "WebhookNormalizationError",
    "normalize_stripe_event",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/normalize.py
