# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/repositories/enrollment_repository.py

Repositorio de inscripciones (Enrollment Store).

Operaciones:
- upsert_from_payment: escribe la inscripción dentro de la MISMA
  transacción que la transición del pago (nunca hace commit).
- create_free: ruta directa para cursos sin costo (sin Payment).
- suspend_for_payment: revoca acceso ligado a un pago (reembolso/disputa).

La fila se lee con SELECT ... FOR UPDATE para serializar escrituras
concurrentes sobre el mismo (user_id, course_id).

Autor: CourseHub
Fecha: 2026-09-04
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.enrollments.enums import EnrollmentStatus, EnrollmentPaymentStatus
from app.modules.enrollments.models import Enrollment

logger = logging.getLogger(__name__)


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self) -> None:
        super().__init__(Enrollment)

    async def get_by_user_course(
        self,
        session: AsyncSession,
        user_id: int,
        course_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[Enrollment]:
        stmt = select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_payment_id(
        self,
        session: AsyncSession,
        payment_id: int,
    ) -> Optional[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.payment_id == payment_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_active_for_course(self, session: AsyncSession, course_id: int) -> int:
        return await self.count(
            session,
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.ACTIVE,
        )

    async def upsert_from_payment(
        self,
        session: AsyncSession,
        *,
        user_id: int,
        course_id: int,
        payment_id: int,
        enrollment_status: EnrollmentStatus,
        payment_status: EnrollmentPaymentStatus,
        preserve_active: bool = False,
    ) -> Tuple[Enrollment, bool]:
        """
        Crea o actualiza la inscripción a partir de un pago.

        Args:
            preserve_active: si True y ya existe una inscripción activa,
                no se toca (un fallo tardío de otro intento no revoca
                el acceso obtenido por un intento exitoso).

        Returns:
            (Enrollment, changed)
        """
        enrollment = await self.get_by_user_course(session, user_id, course_id, for_update=True)

        if enrollment is None:
            try:
                async with session.begin_nested():
                    enrollment = Enrollment(
                        user_id=user_id,
                        course_id=course_id,
                        payment_id=payment_id,
                        status=enrollment_status,
                        payment_status=payment_status,
                    )
                    session.add(enrollment)
                    await session.flush()
                return enrollment, True
            except IntegrityError:
                # Otra transacción insertó la fila primero: se actualiza esa
                logger.info(
                    "Enrollment insert race user=%s course=%s, retrying as update",
                    user_id,
                    course_id,
                )
                enrollment = await self.get_by_user_course(session, user_id, course_id, for_update=True)
                if enrollment is None:
                    raise

        if preserve_active and enrollment.status == EnrollmentStatus.ACTIVE:
            logger.info(
                "Enrollment %s already active (payment=%s); keeping it",
                enrollment.id,
                enrollment.payment_id,
            )
            return enrollment, False

        enrollment.payment_id = payment_id
        enrollment.status = enrollment_status
        enrollment.payment_status = payment_status
        if enrollment_status == EnrollmentStatus.ACTIVE:
            enrollment.suspended_reason = None
        await session.flush()
        return enrollment, True

    async def create_free(
        self,
        session: AsyncSession,
        user_id: int,
        course_id: int,
    ) -> Enrollment:
        """
        Inscripción directa para cursos con precio 0 (sin Payment).

        Reactiva una inscripción previa no activa si existe.
        """
        enrollment = await self.get_by_user_course(session, user_id, course_id, for_update=True)
        if enrollment is None:
            return await self.create(
                session,
                user_id=user_id,
                course_id=course_id,
                status=EnrollmentStatus.ACTIVE,
                payment_status=EnrollmentPaymentStatus.PAID,
                payment_id=None,
            )

        enrollment.status = EnrollmentStatus.ACTIVE
        enrollment.payment_status = EnrollmentPaymentStatus.PAID
        enrollment.suspended_reason = None
        await session.flush()
        return enrollment

    async def suspend_for_payment(
        self,
        session: AsyncSession,
        payment_id: int,
        *,
        reason: str,
        payment_status: Optional[EnrollmentPaymentStatus] = None,
    ) -> Optional[Enrollment]:
        """Suspende la inscripción vinculada a `payment_id`, si existe."""
        enrollment = await self.get_by_payment_id(session, payment_id)
        if enrollment is None:
            return None

        enrollment.status = EnrollmentStatus.SUSPENDED
        enrollment.suspended_reason = reason
        if payment_status is not None:
            enrollment.payment_status = payment_status
        await session.flush()
        return enrollment


__all__ = ["EnrollmentRepository"]

# Fin del archivo backend/app/modules/enrollments/repositories/enrollment_repository.py
