# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/payments/refunds.py

Reembolso administrativo de un pago de curso.

Flujo:
1. Validar que el pago exista y esté succeeded
2. Reembolso en el procesador (sin transacción abierta)
3. El motor de conciliación acumula el monto; al llegar al total el
   pago pasa a refunded y la inscripción se suspende

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    InvalidTransitionError,
    PaymentNotFoundError,
    RefundsDisabledError,
)
from app.modules.payments.providers.stripe_gateway import StripeGateway
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.schemas import RefundResponse
from app.modules.payments.services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


async def refund_payment(
    session: AsyncSession,
    *,
    payment_id: int,
    amount: Optional[Decimal],
    reason: Optional[str],
    gateway: StripeGateway,
    engine: ReconciliationService,
    admin_user_id: Optional[int] = None,
    settings: Optional[PaymentsSettings] = None,
    payment_repo: Optional[PaymentRepository] = None,
) -> RefundResponse:
    """
    Raises:
        RefundsDisabledError, PaymentNotFoundError, InvalidTransitionError,
        RefundExceedsCapturedError, GatewayUnavailableError
    """
    settings = settings or get_payments_settings()
    payment_repo = payment_repo or PaymentRepository()

    if not settings.refunds_enabled:
        raise RefundsDisabledError()

    payment = await payment_repo.get(session, payment_id)
    if payment is None:
        raise PaymentNotFoundError(payment_id=payment_id)
    if payment.status != PaymentStatus.SUCCEEDED:
        raise InvalidTransitionError(
            payment_id=payment_id,
            current_status=payment.status,
            target_status=PaymentStatus.REFUNDED,
        )

    captured = payment.refundable_amount
    refund_amount = Decimal(amount) if amount is not None else captured
    payment_intent_id = payment.external_payment_intent_id
    reason = reason or settings.default_refund_reason

    await session.commit()

    result = await gateway.create_refund(
        payment_intent_id=payment_intent_id,
        amount=refund_amount,
        captured_amount=captured,
        reason=reason,
        metadata={"payment_id": payment_id, "refunded_by": admin_user_id or ""},
    )

    payment, full = await engine.apply_refund(session, payment_id, result, reason=reason)
    logger.info(
        "Admin refund payment=%s refund=%s amount=%s by=%s full=%s",
        payment_id,
        result.refund_id,
        result.amount,
        admin_user_id,
        full,
    )
    return RefundResponse(
        payment_id=payment.id,
        refund_id=result.refund_id,
        refund_amount=result.amount,
        total_refunded=Decimal(payment.refund_amount or 0),
        status=str(payment.status),
        full_refund=full,
    )


__all__ = ["refund_payment"]

# Fin del archivo backend/app/modules/payments/facades/payments/refunds.py
