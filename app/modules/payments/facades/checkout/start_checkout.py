# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/start_checkout.py

Fachada de alto nivel para iniciar (o reanudar) el checkout de un curso.

Orquesta:
1. Lectura: curso comprable, cupo, inscripción activa, pago activo
2. Cierre de la transacción de lectura
3. Creación de la Checkout Session en el procesador (sin transacción abierta)
4. Alta del Payment en una sola transacción; si otra petición
   concurrente ganó el índice único, se devuelve su sesión (resume)

Autor: CourseHub
Fecha: 2026-09-09
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.courses.repositories import CourseRepository
from app.modules.enrollments.enums import EnrollmentStatus
from app.modules.enrollments.repositories import EnrollmentRepository
from app.modules.payments.errors import (
    AlreadyActiveError,
    AlreadyEnrolledError,
    CourseFullError,
    GatewayUnavailableError,
    InvalidCourseError,
)
from app.modules.payments.models import Payment
from app.modules.payments.providers.stripe_gateway import StripeGateway
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.schemas import CheckoutResponse
from .idempotency import build_idempotency_key
from .validators import validate_course_pricing

logger = logging.getLogger(__name__)


def _resume_response(payment: Payment) -> CheckoutResponse:
    return CheckoutResponse(
        course_id=payment.course_id,
        payment_id=payment.id,
        session_id=payment.external_session_id,
        checkout_url=payment.checkout_url,
        status=str(payment.status),
        amount=payment.amount,
        currency=payment.currency,
        resumed=True,
    )


async def start_checkout(
    session: AsyncSession,
    *,
    user_id: int,
    course_id: int,
    gateway: StripeGateway,
    settings: Optional[PaymentsSettings] = None,
    customer_email: Optional[str] = None,
    course_repo: Optional[CourseRepository] = None,
    enrollment_repo: Optional[EnrollmentRepository] = None,
    payment_repo: Optional[PaymentRepository] = None,
) -> CheckoutResponse:
    """
    Inicia el checkout de un curso para el usuario indicado.

    Raises:
        InvalidCourseError, CourseFullError, AlreadyEnrolledError,
        InvalidAmountError, InvalidCurrencyError, GatewayUnavailableError
    """
    settings = settings or get_payments_settings()
    course_repo = course_repo or CourseRepository()
    enrollment_repo = enrollment_repo or EnrollmentRepository()
    payment_repo = payment_repo or PaymentRepository()

    # 1) Lecturas
    course = await course_repo.get_purchasable(session, course_id)
    if course is None:
        raise InvalidCourseError(course_id=course_id)

    enrollment = await enrollment_repo.get_by_user_course(session, user_id, course_id)
    if enrollment is not None and enrollment.status == EnrollmentStatus.ACTIVE:
        raise AlreadyEnrolledError(course_id=course_id)

    if course.max_students is not None:
        active_count = await enrollment_repo.count_active_for_course(session, course_id)
        if active_count >= course.max_students:
            raise CourseFullError(course_id=course_id, max_students=course.max_students)

    if course.is_free:
        enrollment = await enrollment_repo.create_free(session, user_id, course_id)
        await session.commit()
        logger.info("Free enrollment %s created user=%s course=%s", enrollment.id, user_id, course_id)
        return CheckoutResponse(
            course_id=course_id,
            status="enrolled",
            free=True,
            enrollment_id=enrollment.id,
        )

    if not settings.payments_enabled:
        raise GatewayUnavailableError("Paid checkout is disabled")

    validate_course_pricing(course, settings)

    existing = await payment_repo.find_active(session, user_id, course_id)
    if existing is not None:
        await session.commit()
        logger.info("Resuming active payment %s user=%s course=%s", existing.id, user_id, course_id)
        return _resume_response(existing)

    attempt = await payment_repo.count_for_user_course(session, user_id, course_id)
    title = course.title
    amount = course.price
    currency = (course.currency or settings.default_currency).upper()

    # 2) Sin transacción abierta durante la llamada al procesador
    await session.commit()

    # 3) Procesador
    idempotency_key = build_idempotency_key(
        user_id,
        course_id,
        attempt,
        salt=settings.payments_idempotency_salt,
        hex_length=settings.payments_idempotency_hex_length,
    )
    result = await gateway.create_checkout_session(
        amount=amount,
        currency=currency,
        course_title=title,
        metadata={"user_id": user_id, "course_id": course_id},
        idempotency_key=idempotency_key,
        customer_email=customer_email,
    )

    # 4) Alta del pago
    try:
        payment = await payment_repo.create_payment(
            session,
            user_id=user_id,
            course_id=course_id,
            amount=amount,
            currency=currency,
            idempotency_key=idempotency_key,
            external_session_id=result.session_id,
            checkout_url=result.redirect_url,
            metadata={"attempt": attempt},
        )
        await session.commit()
    except AlreadyActiveError as e:
        winner = await payment_repo.get(session, e.payment_id) if e.payment_id else None
        await session.commit()
        if winner is None:
            raise
        if winner.external_session_id != result.session_id:
            logger.warning(
                "Lost checkout race user=%s course=%s; session %s left to expire",
                user_id,
                course_id,
                result.session_id,
            )
        return _resume_response(winner)

    logger.info(
        "Checkout started payment=%s session=%s user=%s course=%s attempt=%s",
        payment.id,
        result.session_id,
        user_id,
        course_id,
        attempt,
    )
    return CheckoutResponse(
        course_id=course_id,
        payment_id=payment.id,
        session_id=payment.external_session_id,
        checkout_url=payment.checkout_url,
        status=str(payment.status),
        amount=payment.amount,
        currency=payment.currency,
        resumed=False,
    )


__all__ = ["start_checkout"]

# Fin del archivo backend/app/modules/payments/facades/checkout/start_checkout.py
