# backend/tests/modules/payments/facades/test_start_checkout.py
# -*- coding: utf-8 -*-
"""
start_checkout: validaciones, curso gratuito, reanudación y carrera
de dobles clics.
"""

import asyncio
from decimal import Decimal

import pytest

from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus
from app.modules.enrollments.repositories import EnrollmentRepository
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    AlreadyEnrolledError,
    CourseFullError,
    GatewayUnavailableError,
    InvalidAmountError,
    InvalidCourseError,
    InvalidCurrencyError,
)
from app.modules.payments.facades.checkout import start_checkout
from app.modules.payments.repositories import PaymentRepository

pytestmark = pytest.mark.usefixtures("courses")


async def _start(session, gateway, settings, *, user_id=1, course_id=7):
    return await start_checkout(
        session,
        user_id=user_id,
        course_id=course_id,
        gateway=gateway,
        settings=settings,
        customer_email="ana@example.com",
    )


@pytest.mark.asyncio
async def test_paid_course_creates_session_and_payment(db, gateway, payments_settings):
    response = await _start(db, gateway, payments_settings)

    assert response.resumed is False
    assert response.status == "created"
    assert response.amount == Decimal("99.99")
    assert response.currency == "USD"
    assert response.session_id == "cs_test_1"
    assert response.checkout_url.endswith("cs_test_1")

    call = gateway.checkout_calls[0]
    assert call["metadata"] == {"user_id": 1, "course_id": 7}
    assert call["customer_email"] == "ana@example.com"
    assert call["course_title"] == "Python para análisis de datos"

    payment = await PaymentRepository().get(db, response.payment_id)
    assert payment.status == PaymentStatus.CREATED
    assert payment.idempotency_key == call["idempotency_key"]
    assert payment.payment_metadata == {"attempt": 0}


@pytest.mark.asyncio
async def test_second_call_resumes_active_payment(db, gateway, payments_settings):
    first = await _start(db, gateway, payments_settings)
    second = await _start(db, gateway, payments_settings)

    assert second.resumed is True
    assert second.payment_id == first.payment_id
    assert second.session_id == first.session_id
    assert len(gateway.checkout_calls) == 1


@pytest.mark.asyncio
async def test_concurrent_double_click_yields_single_payment(session_factory, gateway, payments_settings):
    async def _click():
        async with session_factory() as session:
            return await _start(session, gateway, payments_settings)

    results = await asyncio.gather(*[_click() for _ in range(4)])

    assert len({r.payment_id for r in results}) == 1
    assert len({r.session_id for r in results}) == 1
    assert sum(1 for r in results if not r.resumed) == 1

    async with session_factory() as session:
        assert await PaymentRepository().count_for_user_course(session, 1, 7) == 1


@pytest.mark.asyncio
async def test_retry_after_cancel_uses_new_attempt_key(db, gateway, payments_settings):
    first = await _start(db, gateway, payments_settings)
    await PaymentRepository().transition(db, first.payment_id, [PaymentStatus.CREATED], PaymentStatus.CANCELED)
    await db.commit()

    second = await _start(db, gateway, payments_settings)

    assert second.resumed is False
    assert second.payment_id != first.payment_id
    assert second.session_id != first.session_id
    keys = [c["idempotency_key"] for c in gateway.checkout_calls]
    assert keys[0] != keys[1]


@pytest.mark.asyncio
async def test_free_course_enrolls_without_payment(db, gateway, payments_settings, courses):
    response = await _start(db, gateway, payments_settings, course_id=courses["free"])

    assert response.free is True
    assert response.status == "enrolled"
    assert response.payment_id is None
    assert gateway.checkout_calls == []

    enrollment = await EnrollmentRepository().get_by_user_course(db, 1, courses["free"])
    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert enrollment.payment_status == EnrollmentPaymentStatus.PAID


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "course_key, error",
    [
        ("inactive", InvalidCourseError),
        ("bad_currency", InvalidCurrencyError),
        ("too_cheap", InvalidAmountError),
    ],
)
async def test_rejected_courses(db, gateway, payments_settings, courses, course_key, error):
    with pytest.raises(error):
        await _start(db, gateway, payments_settings, course_id=courses[course_key])
    assert gateway.checkout_calls == []


@pytest.mark.asyncio
async def test_unknown_course(db, gateway, payments_settings):
    with pytest.raises(InvalidCourseError) as exc:
        await _start(db, gateway, payments_settings, course_id=4040)
    assert exc.value.http_status == 404


@pytest.mark.asyncio
async def test_already_enrolled(db, gateway, payments_settings, courses):
    await EnrollmentRepository().create_free(db, 1, courses["paid"])
    await db.commit()

    with pytest.raises(AlreadyEnrolledError):
        await _start(db, gateway, payments_settings)


@pytest.mark.asyncio
async def test_course_full(db, gateway, payments_settings, courses):
    await EnrollmentRepository().create_free(db, 99, courses["limited"])
    await db.commit()

    with pytest.raises(CourseFullError):
        await _start(db, gateway, payments_settings, course_id=courses["limited"])


@pytest.mark.asyncio
async def test_gateway_failure_leaves_no_payment(db, gateway, payments_settings):
    gateway.unavailable = True

    with pytest.raises(GatewayUnavailableError) as exc:
        await _start(db, gateway, payments_settings)

    assert exc.value.retryable is True
    assert await PaymentRepository().count_for_user_course(db, 1, 7) == 0


@pytest.mark.asyncio
async def test_paid_checkout_disabled(db, gateway, payments_settings, courses):
    settings = payments_settings.model_copy(update={"payments_enabled": False})

    with pytest.raises(GatewayUnavailableError):
        await _start(db, gateway, settings)

    # Los cursos gratuitos siguen disponibles
    response = await _start(db, gateway, settings, course_id=courses["free"])
    assert response.free is True
