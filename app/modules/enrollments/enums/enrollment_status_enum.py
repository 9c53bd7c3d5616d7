# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/enums/enrollment_status_enum.py

Enums de inscripción.
Sincronizados con los tipos ENUM de PostgreSQL:
- enrollment_status_enum
- enrollment_payment_status_enum

La ausencia de fila equivale al estado "none".

Autor: CourseHub
Fecha: 2026-09-04
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class EnrollmentStatus(StrEnum):
    """Relación del usuario con el curso."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DROPPED = "dropped"
    COMPLETED = "completed"

    __pg_enum_name__ = "enrollment_status_enum"

    @classmethod
    def as_pg_enum(cls, schema: str | None = None) -> PG_ENUM:
        return _as_pg_enum(cls, name=cls.__pg_enum_name__, schema=schema)


class EnrollmentPaymentStatus(StrEnum):
    """Estado de cobro visto desde la inscripción."""

    UNPAID = "unpaid"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    __pg_enum_name__ = "enrollment_payment_status_enum"

    @classmethod
    def as_pg_enum(cls, schema: str | None = None) -> PG_ENUM:
        return _as_pg_enum(cls, name=cls.__pg_enum_name__, schema=schema)


__all__ = ["EnrollmentStatus", "EnrollmentPaymentStatus"]

# Fin del archivo backend/app/modules/enrollments/enums/enrollment_status_enum.py
