# backend/tests/modules/enrollments/test_enrollment_repository.py
# -*- coding: utf-8 -*-
"""
EnrollmentRepository: upsert desde pagos, preserve_active, cursos
gratuitos y suspensión por reembolso.
"""

from decimal import Decimal

import pytest

from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus
from app.modules.enrollments.repositories import EnrollmentRepository
from app.modules.payments.repositories import PaymentRepository

pytestmark = pytest.mark.usefixtures("courses")


async def _payment(db, key: str, session_id: str):
    payment = await PaymentRepository().create_payment(
        db,
        user_id=1,
        course_id=7,
        amount=Decimal("99.99"),
        currency="USD",
        idempotency_key=key,
        external_session_id=session_id,
    )
    await db.flush()
    return payment


@pytest.mark.asyncio
async def test_upsert_creates_then_updates(db):
    repo = EnrollmentRepository()
    payment = await _payment(db, "k1", "cs_1")

    enrollment, changed = await repo.upsert_from_payment(
        db,
        user_id=1,
        course_id=7,
        payment_id=payment.id,
        enrollment_status=EnrollmentStatus.SUSPENDED,
        payment_status=EnrollmentPaymentStatus.UNPAID,
    )
    assert changed is True
    assert enrollment.payment_status == EnrollmentPaymentStatus.UNPAID

    enrollment, changed = await repo.upsert_from_payment(
        db,
        user_id=1,
        course_id=7,
        payment_id=payment.id,
        enrollment_status=EnrollmentStatus.ACTIVE,
        payment_status=EnrollmentPaymentStatus.PAID,
    )
    await db.commit()

    assert changed is True
    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert await repo.count(db) == 1
    assert await repo.count_active_for_course(db, 7) == 1


@pytest.mark.asyncio
async def test_preserve_active_keeps_access(db):
    repo = EnrollmentRepository()
    payment = await _payment(db, "k1", "cs_1")
    await repo.upsert_from_payment(
        db,
        user_id=1,
        course_id=7,
        payment_id=payment.id,
        enrollment_status=EnrollmentStatus.ACTIVE,
        payment_status=EnrollmentPaymentStatus.PAID,
    )

    enrollment, changed = await repo.upsert_from_payment(
        db,
        user_id=1,
        course_id=7,
        payment_id=payment.id,
        enrollment_status=EnrollmentStatus.SUSPENDED,
        payment_status=EnrollmentPaymentStatus.FAILED,
        preserve_active=True,
    )

    assert changed is False
    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert enrollment.payment_status == EnrollmentPaymentStatus.PAID


@pytest.mark.asyncio
async def test_create_free_reactivates_previous_enrollment(db):
    repo = EnrollmentRepository()
    payment = await _payment(db, "k1", "cs_1")
    await repo.upsert_from_payment(
        db,
        user_id=1,
        course_id=7,
        payment_id=payment.id,
        enrollment_status=EnrollmentStatus.ACTIVE,
        payment_status=EnrollmentPaymentStatus.PAID,
    )
    suspended = await repo.suspend_for_payment(
        db,
        payment.id,
        reason="refunded",
        payment_status=EnrollmentPaymentStatus.REFUNDED,
    )
    assert suspended.status == EnrollmentStatus.SUSPENDED
    assert suspended.suspended_reason == "refunded"

    enrollment = await repo.create_free(db, user_id=1, course_id=7)
    await db.commit()

    assert enrollment.id == suspended.id
    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert enrollment.suspended_reason is None


@pytest.mark.asyncio
async def test_create_free_new_enrollment_has_no_payment(db):
    enrollment = await EnrollmentRepository().create_free(db, user_id=3, course_id=8)
    await db.commit()

    assert enrollment.payment_id is None
    assert enrollment.payment_status == EnrollmentPaymentStatus.PAID


@pytest.mark.asyncio
async def test_suspend_without_enrollment_returns_none(db):
    assert await EnrollmentRepository().suspend_for_payment(db, 404, reason="refunded") is None
