# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/payment_status_enum.py

Enum de estados de un intento de pago.
Sincronizado con el tipo ENUM de PostgreSQL: payment_status_enum.

Ciclo de vida:
    created → pending → {succeeded | failed | canceled}
    succeeded → refunded   (solo vía reembolso)

Autor: CourseHub
Fecha: 2026-09-03
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class PaymentStatus(StrEnum):
    """Estado del pago frente al procesador."""

    CREATED = "created"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"
    REFUNDED = "refunded"

    __pg_enum_name__ = "payment_status_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "payment_status_enum",
        schema: str | None = None,
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)

    @property
    def is_terminal(self) -> bool:
        return self not in NON_TERMINAL_STATUSES


# A lo sumo un pago en estos estados por (user_id, course_id)
NON_TERMINAL_STATUSES = frozenset({PaymentStatus.CREATED, PaymentStatus.PENDING})

TERMINAL_STATUSES = frozenset(
    {
        PaymentStatus.SUCCEEDED,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELED,
        PaymentStatus.REFUNDED,
    }
)


__all__ = ["PaymentStatus", "NON_TERMINAL_STATUSES", "TERMINAL_STATUSES"]

# Fin del archivo backend/app/modules/payments/enums/payment_status_enum.py
