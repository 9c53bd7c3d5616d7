# backend/tests/modules/payments/repositories/test_payment_repository.py
# -*- coding: utf-8 -*-
"""
PaymentRepository: regla de un pago activo por (usuario, curso) y
transition() como compare-and-set.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    AlreadyActiveError,
    InvalidTransitionError,
    PaymentNotFoundError,
)
from app.modules.payments.repositories import PaymentRepository

pytestmark = pytest.mark.usefixtures("courses")


async def _create(repo, session, *, user_id=1, course_id=7, key="key-1", session_id="cs_1"):
    payment = await repo.create_payment(
        session,
        user_id=user_id,
        course_id=course_id,
        amount=Decimal("99.99"),
        currency="usd",
        idempotency_key=key,
        external_session_id=session_id,
        checkout_url=f"https://checkout.stripe.test/{session_id}",
    )
    await session.commit()
    return payment


@pytest.mark.asyncio
async def test_create_payment_starts_in_created(db):
    repo = PaymentRepository()
    payment = await _create(repo, db)

    assert payment.id is not None
    assert payment.status == PaymentStatus.CREATED
    assert payment.currency == "USD"
    assert payment.amount_cents == 9999
    assert payment.payment_metadata == {}


@pytest.mark.asyncio
async def test_second_active_payment_is_rejected(db):
    repo = PaymentRepository()
    first = await _create(repo, db)

    with pytest.raises(AlreadyActiveError) as exc:
        await _create(repo, db, key="key-2", session_id="cs_2")

    assert exc.value.payment_id == first.id
    assert exc.value.code == "ALREADY_ACTIVE"


@pytest.mark.asyncio
async def test_terminal_payment_frees_the_active_slot(db):
    repo = PaymentRepository()
    first = await _create(repo, db)
    await repo.transition(db, first.id, [PaymentStatus.CREATED], PaymentStatus.CANCELED)
    await db.commit()

    second = await _create(repo, db, key="key-2", session_id="cs_2")

    assert second.id != first.id
    assert await repo.count_for_user_course(db, 1, 7) == 2
    active = await repo.find_active(db, 1, 7)
    assert active.id == second.id


@pytest.mark.asyncio
async def test_concurrent_inserts_leave_one_active(session_factory):
    """N inserciones concurrentes: una gana, el resto recibe AlreadyActiveError."""
    repo = PaymentRepository()

    async def _attempt(i: int):
        async with session_factory() as session:
            try:
                return await _create(repo, session, key=f"key-{i}", session_id=f"cs_{i}")
            except AlreadyActiveError as e:
                await session.rollback()
                return e

    results = await asyncio.gather(*[_attempt(i) for i in range(5)])

    winners = [r for r in results if not isinstance(r, AlreadyActiveError)]
    losers = [r for r in results if isinstance(r, AlreadyActiveError)]
    assert len(winners) == 1
    assert len(losers) == 4
    assert all(e.payment_id == winners[0].id for e in losers)


@pytest.mark.asyncio
async def test_transition_applies_fields_when_status_matches(db):
    repo = PaymentRepository()
    payment = await _create(repo, db)
    paid_at = datetime.now(timezone.utc)

    updated = await repo.transition(
        db,
        payment.id,
        [PaymentStatus.CREATED, PaymentStatus.PENDING],
        PaymentStatus.SUCCEEDED,
        {"paid_at": paid_at, "external_payment_intent_id": "pi_123"},
    )
    await db.commit()

    assert updated.status == PaymentStatus.SUCCEEDED
    assert updated.external_payment_intent_id == "pi_123"
    assert updated.paid_at is not None
    found = await repo.find_by_payment_intent_id(db, "pi_123")
    assert found.id == payment.id


@pytest.mark.asyncio
async def test_transition_from_wrong_status_raises_and_keeps_row(db):
    repo = PaymentRepository()
    payment = await _create(repo, db)
    await repo.transition(db, payment.id, [PaymentStatus.CREATED], PaymentStatus.FAILED)
    await db.commit()

    with pytest.raises(InvalidTransitionError) as exc:
        await repo.transition(db, payment.id, [PaymentStatus.SUCCEEDED], PaymentStatus.REFUNDED)

    assert exc.value.current_status == PaymentStatus.FAILED
    assert exc.value.target_status == PaymentStatus.REFUNDED
    await db.rollback()
    reloaded = await repo.get(db, payment.id)
    assert reloaded.status == PaymentStatus.FAILED


@pytest.mark.asyncio
async def test_transition_unknown_payment_raises_not_found(db):
    repo = PaymentRepository()
    with pytest.raises(PaymentNotFoundError):
        await repo.transition(db, 999, [PaymentStatus.CREATED], PaymentStatus.CANCELED)


@pytest.mark.asyncio
async def test_list_by_user_paginates_newest_first(db):
    repo = PaymentRepository()
    for i in range(3):
        payment = await _create(repo, db, key=f"key-{i}", session_id=f"cs_{i}")
        await repo.transition(db, payment.id, [PaymentStatus.CREATED], PaymentStatus.CANCELED)
        await db.commit()
    await _create(repo, db, user_id=2, key="other", session_id="cs_other")

    items, total = await repo.list_by_user(db, 1, limit=2, offset=0)
    assert total == 3
    assert [p.idempotency_key for p in items] == ["key-2", "key-1"]

    items, total = await repo.list_by_user(db, 1, status=PaymentStatus.SUCCEEDED)
    assert total == 0
    assert list(items) == []


@pytest.mark.asyncio
async def test_list_stale_created_uses_cutoff(db):
    repo = PaymentRepository()
    payment = await _create(repo, db)

    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    future = datetime.now(timezone.utc) + timedelta(minutes=5)

    assert list(await repo.list_stale_created(db, past)) == []
    stale = await repo.list_stale_created(db, future)
    assert [p.id for p in stale] == [payment.id]


@pytest.mark.asyncio
@pytest.mark.usefixtures("courses")
async def test_list_payments_combines_optional_filters(db):
    repo = PaymentRepository()
    await _create(repo, db, user_id=1, course_id=7, key="u1-c7", session_id="cs_a")
    await _create(repo, db, user_id=2, course_id=7, key="u2-c7", session_id="cs_b")
    await _create(repo, db, user_id=1, course_id=10, key="u1-c10", session_id="cs_c")

    _, total = await repo.list_payments(db)
    assert total == 3

    items, total = await repo.list_payments(db, course_id=7)
    assert total == 2
    assert {p.user_id for p in items} == {1, 2}

    items, total = await repo.list_payments(db, user_id=1, course_id=10)
    assert total == 1
    assert items[0].idempotency_key == "u1-c10"

    _, total = await repo.list_payments(db, status=PaymentStatus.SUCCEEDED)
    assert total == 0
