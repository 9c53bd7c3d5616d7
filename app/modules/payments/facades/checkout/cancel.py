# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/cancel.py

Cancelación explícita de un checkout aún no pagado (created → canceled).
Cualquier otro estado responde NOT_CANCELABLE.

Flujo:
1. Leer el pago activo y cerrar la transacción de lectura
2. Expirar la Checkout Session en el procesador (sin transacción abierta)
3. Compare-and-set local created → canceled

Si el procesador rechaza la expiración (la sesión ya se pagó o expiró)
el pago local no se toca y el webhook correspondiente lo concilia.

Autor: CourseHub
Fecha: 2026-09-09
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    InvalidTransitionError,
    NotCancelableError,
    PaymentNotFoundError,
)
from app.modules.payments.providers.stripe_gateway import StripeGateway
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.schemas import CancelCheckoutResponse
from app.modules.payments.services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


async def cancel_pending_checkout(
    session: AsyncSession,
    *,
    user_id: int,
    course_id: int,
    engine: ReconciliationService,
    gateway: StripeGateway,
    payment_repo: Optional[PaymentRepository] = None,
) -> CancelCheckoutResponse:
    """
    Raises:
        PaymentNotFoundError, NotCancelableError, GatewayUnavailableError
    """
    payment_repo = payment_repo or PaymentRepository()

    payment = await payment_repo.find_active(session, user_id, course_id)
    if payment is None:
        raise PaymentNotFoundError("No active payment for this course", course_id=course_id)

    payment_id = payment.id
    if payment.status != PaymentStatus.CREATED:
        raise NotCancelableError(payment_id=payment_id, status=str(payment.status))

    provider_session_id = payment.external_session_id
    await session.commit()

    if provider_session_id:
        await gateway.expire_session(provider_session_id)

    payment = await payment_repo.get(session, payment_id)
    if payment is None:
        raise PaymentNotFoundError(payment_id=payment_id)
    try:
        payment = await engine.cancel_pending(session, payment, canceled_by="user")
    except InvalidTransitionError as e:
        raise NotCancelableError(
            payment_id=payment_id,
            status=str(e.current_status),
        ) from e

    logger.info("Checkout canceled by user=%s course=%s payment=%s", user_id, course_id, payment_id)
    return CancelCheckoutResponse(payment_id=payment.id, status=str(payment.status))


__all__ = ["cancel_pending_checkout"]

# Fin del archivo backend/app/modules/payments/facades/checkout/cancel.py
