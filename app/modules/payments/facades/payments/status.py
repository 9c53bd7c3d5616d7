# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/payments/status.py

Consulta de estado de un checkout (solo lectura).

Combina la fila del ledger con el estado en vivo de la Checkout
Session. El webhook es la única ruta autoritativa de éxito: esta
consulta nunca modifica el pago.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.enrollments.repositories import EnrollmentRepository
from app.modules.payments.errors import GatewayUnavailableError, PaymentNotFoundError
from app.modules.payments.providers.stripe_gateway import StripeGateway
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.schemas import PaymentOut, PaymentStatusResponse

logger = logging.getLogger(__name__)


async def get_payment_status(
    session: AsyncSession,
    *,
    user_id: int,
    session_id: str,
    gateway: StripeGateway,
    payment_repo: Optional[PaymentRepository] = None,
    enrollment_repo: Optional[EnrollmentRepository] = None,
) -> PaymentStatusResponse:
    payment_repo = payment_repo or PaymentRepository()
    enrollment_repo = enrollment_repo or EnrollmentRepository()

    payment = await payment_repo.find_by_session_id(session, session_id)
    if payment is None or payment.user_id != user_id:
        raise PaymentNotFoundError(session_id=session_id)

    enrollment = await enrollment_repo.get_by_user_course(session, payment.user_id, payment.course_id)
    response = PaymentStatusResponse(
        payment=PaymentOut.model_validate(payment),
        enrollment_status=str(enrollment.status) if enrollment else None,
        enrollment_payment_status=str(enrollment.payment_status) if enrollment else None,
    )
    await session.commit()

    try:
        state = await gateway.retrieve_session(session_id)
        response.gateway = state.to_dict()
    except GatewayUnavailableError:
        logger.warning("Gateway unavailable for status of session %s; returning ledger only", session_id)

    return response


__all__ = ["get_payment_status"]

# Fin del archivo backend/app/modules/payments/facades/payments/status.py
