# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/constants.py

Tipos de evento Stripe que mueven la máquina de estados del pago.

Autor: CourseHub
Fecha: 2026-09-06
"""

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"
EVENT_ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
EVENT_ASYNC_PAYMENT_FAILED = "checkout.session.async_payment_failed"
EVENT_SESSION_EXPIRED = "checkout.session.expired"
EVENT_PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"
EVENT_CHARGE_REFUNDED = "charge.refunded"
EVENT_REFUND_UPDATED = "refund.updated"
EVENT_DISPUTE_CREATED = "charge.dispute.created"

# Clasificación interna (NormalizedWebhook.kind)
KIND_COMPLETED = "completed"
KIND_SUCCEEDED = "succeeded"
KIND_FAILED = "failed"
KIND_EXPIRED = "expired"
KIND_REFUND = "refund"
KIND_DISPUTE = "dispute"
KIND_IGNORED = "ignored"

EVENT_KINDS = {
    EVENT_CHECKOUT_COMPLETED: KIND_COMPLETED,
    EVENT_ASYNC_PAYMENT_SUCCEEDED: KIND_SUCCEEDED,
    EVENT_ASYNC_PAYMENT_FAILED: KIND_FAILED,
    EVENT_PAYMENT_INTENT_FAILED: KIND_FAILED,
    EVENT_SESSION_EXPIRED: KIND_EXPIRED,
    EVENT_CHARGE_REFUNDED: KIND_REFUND,
    EVENT_REFUND_UPDATED: KIND_REFUND,
    EVENT_DISPUTE_CREATED: KIND_DISPUTE,
}

# payment_status de Checkout Session que equivale a cobro confirmado
PAID_SESSION_STATUSES = frozenset({"paid", "no_payment_required"})

__all__ = [
    "EVENT_CHECKOUT_COMPLETED",
    "EVENT_ASYNC_PAYMENT_SUCCEEDED",
    "EVENT_ASYNC_PAYMENT_FAILED",
    "EVENT_SESSION_EXPIRED",
    "EVENT_PAYMENT_INTENT_FAILED",
    "EVENT_CHARGE_REFUNDED",
    "EVENT_REFUND_UPDATED",
    "EVENT_DISPUTE_CREATED",
    "KIND_COMPLETED",
    "KIND_SUCCEEDED",
    "KIND_FAILED",
    "KIND_EXPIRED",
    "KIND_REFUND",
    "KIND_DISPUTE",
    "KIND_IGNORED",
    "EVENT_KINDS",
    "PAID_SESSION_STATUSES",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/constants.py
