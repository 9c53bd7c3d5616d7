# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payments (Payment Ledger Store).

Responsabilidades:
- Alta de intentos con la regla "a lo sumo un pago activo por
  (user_id, course_id)" (consulta previa + índice único parcial)
- Búsqueda por Checkout Session / PaymentIntent del procesador
- transition(): compare-and-set atómico sobre el estado del pago

Nunca hace commit: comparte la transacción del servicio que lo usa,
de modo que pago e inscripción se confirman juntos.

Autor: CourseHub
Fecha: 2026-09-04
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import PaymentStatus, NON_TERMINAL_STATUSES
from app.modules.payments.errors import (
    AlreadyActiveError,
    InvalidTransitionError,
    PaymentNotFoundError,
)
from app.modules.payments.models.payment_models import Payment

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self) -> None:
        super().__init__(Payment)

    # -----------------------------------------------------------
    # Búsquedas
    # -----------------------------------------------------------
    async def find_active(
        self,
        session: AsyncSession,
        user_id: int,
        course_id: int,
    ) -> Optional[Payment]:
        """Pago created/pending de (user_id, course_id), si existe."""
        stmt = select(Payment).where(
            Payment.user_id == user_id,
            Payment.course_id == course_id,
            Payment.status.in_(list(NON_TERMINAL_STATUSES)),
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def find_by_session_id(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.external_session_id == session_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_payment_intent_id(
        self,
        session: AsyncSession,
        payment_intent_id: str,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.external_payment_intent_id == payment_intent_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def find_by_idempotency_key(
        self,
        session: AsyncSession,
        idempotency_key: str,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.idempotency_key == idempotency_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, session: AsyncSession, payment_id: int) -> Optional[Payment]:
        """Lee el pago bloqueando la fila hasta el fin de la transacción."""
        stmt = (
            select(Payment)
            .where(Payment.id == payment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_user_course(
        self,
        session: AsyncSession,
        user_id: int,
        course_id: int,
    ) -> int:
        return await self.count(
            session,
            Payment.user_id == user_id,
            Payment.course_id == course_id,
        )

    async def list_payments(
        self,
        session: AsyncSession,
        *,
        user_id: Optional[int] = None,
        course_id: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[Payment], int]:
        """Listado paginado (más reciente primero) + total; filtros opcionales."""
        criteria = []
        if user_id is not None:
            criteria.append(Payment.user_id == user_id)
        if course_id is not None:
            criteria.append(Payment.course_id == course_id)
        if status is not None:
            criteria.append(Payment.status == status)

        stmt = (
            select(Payment)
            .where(*criteria)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        total = await self.count(session, *criteria)
        return result.scalars().all(), total

    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: int,
        *,
        status: Optional[PaymentStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[Payment], int]:
        """Historial de un usuario."""
        return await self.list_payments(
            session,
            user_id=user_id,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def list_stale_created(
        self,
        session: AsyncSession,
        cutoff: datetime,
        limit: int = 500,
    ) -> Sequence[Payment]:
        """Pagos 'created' anteriores a cutoff (sesiones abandonadas)."""
        stmt = (
            select(Payment)
            .where(
                Payment.status == PaymentStatus.CREATED,
                Payment.created_at < cutoff,
            )
            .order_by(Payment.id)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    # -----------------------------------------------------------
    # Escrituras
    # -----------------------------------------------------------
    async def create_payment(
        self,
        session: AsyncSession,
        *,
        user_id: int,
        course_id: int,
        amount: Decimal,
        currency: str,
        idempotency_key: str,
        external_session_id: Optional[str] = None,
        checkout_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        """
        Inserta un pago en estado created.

        Raises:
            AlreadyActiveError: si ya existe un pago created/pending para
                (user_id, course_id), incluido el caso en que una
                inserción concurrente gana el índice único.
        """
        existing = await self.find_active(session, user_id, course_id)
        if existing is not None:
            raise AlreadyActiveError(payment_id=existing.id)

        payment = Payment(
            user_id=user_id,
            course_id=course_id,
            amount=amount,
            currency=currency.upper(),
            idempotency_key=idempotency_key,
            external_session_id=external_session_id,
            checkout_url=checkout_url,
            status=PaymentStatus.CREATED,
            payment_metadata=dict(metadata or {}),
        )
        try:
            async with session.begin_nested():
                session.add(payment)
                await session.flush()
        except IntegrityError as e:
            logger.info(
                "Active payment conflict for user=%s course=%s key=%s, fetching winner",
                user_id,
                course_id,
                idempotency_key[:8] + "...",
            )
            winner = await self.find_active(session, user_id, course_id)
            if winner is None:
                logger.error("IntegrityError but no active payment found: %s", e)
                raise
            raise AlreadyActiveError(payment_id=winner.id) from e

        return payment

    async def transition(
        self,
        session: AsyncSession,
        payment_id: int,
        from_statuses: Iterable[PaymentStatus],
        to_status: PaymentStatus,
        fields: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        """
        Compare-and-set atómico del estado del pago.

        UPDATE payments SET status=:to, ... WHERE id=:id AND status IN (:from)

        Raises:
            InvalidTransitionError: si el estado actual no está en
                from_statuses (evento repetido o fuera de orden).
            PaymentNotFoundError: si el pago no existe.
        """
        allowed = list(from_statuses)
        values: Dict[str, Any] = dict(fields or {})
        values["status"] = to_status
        values["updated_at"] = datetime.now(timezone.utc)

        stmt = (
            update(Payment)
            .where(Payment.id == payment_id, Payment.status.in_(allowed))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)

        if result.rowcount == 0:
            current = await session.execute(select(Payment.status).where(Payment.id == payment_id))
            current_status = current.scalar_one_or_none()
            if current_status is None:
                raise PaymentNotFoundError(payment_id=payment_id)
            raise InvalidTransitionError(
                payment_id=payment_id,
                current_status=current_status,
                target_status=to_status,
            )

        payment = await session.get(Payment, payment_id, populate_existing=True)
        logger.debug(
            "Payment %s transitioned %s -> %s",
            payment_id,
            [str(s) for s in allowed],
            to_status,
        )
        return payment  # type: ignore[return-value]


__all__ = ["PaymentRepository"]

# Fin del archivo backend/app/modules/payments/repositories/payment_repository.py
