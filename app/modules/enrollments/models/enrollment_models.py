# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/models/enrollment_models.py

Modelo ORM para la tabla enrollments.

Invariante: en cursos con precio > 0, status=active implica un
Payment vinculado (payment_id) en estado succeeded. Solo el motor de
conciliación escribe esta tabla para cursos de pago.

Autor: CourseHub
Fecha: 2026-09-04
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base
from app.modules.enrollments.enums import EnrollmentStatus, EnrollmentPaymentStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Enrollment(Base):
    __tablename__ = "enrollments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[EnrollmentStatus] = mapped_column(
        EnrollmentStatus.as_pg_enum(),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
    )

    payment_status: Mapped[EnrollmentPaymentStatus] = mapped_column(
        EnrollmentPaymentStatus.as_pg_enum(),
        nullable=False,
        default=EnrollmentPaymentStatus.UNPAID,
    )

    payment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Pago que originó el estado actual de la inscripción.",
    )

    suspended_reason: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<Enrollment id={self.id} user={self.user_id} course={self.course_id} "
            f"status={self.status} payment_status={self.payment_status}>"
        )


__all__ = ["Enrollment"]

# Fin del archivo backend/app/modules/enrollments/models/enrollment_models.py
