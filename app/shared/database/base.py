# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa compartida por todos los modelos ORM de CourseHub.

Proporciona:
- Base: clase declarativa con convención de nombres para constraints
- NAMING_CONVENTION: nombres estables para índices/FKs (migraciones)
- as_pg_enum: mapea un Enum de Python a un ENUM nativo de PostgreSQL

Autor: CourseHub
Fecha: 2026-09-02
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """Base declarativa única (payments, enrollments, courses)."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== HELPER GENÉRICO PARA ENUMS PG =====
def as_pg_enum(
    enum_cls: Type[Enum],
    name: str | None = None,
    schema: str | None = None,
) -> PG_ENUM:
    """
    Devuelve un tipo ENUM de PostgreSQL basado en un Enum de Python.

    Ejemplo:

        status: Mapped[PaymentStatus] = mapped_column(
            as_pg_enum(PaymentStatus, name="payment_status_enum"),
            nullable=False,
        )

    - Persiste `.value` (no el nombre del miembro).
    - create_type=False: el tipo se crea vía migraciones SQL.
    - Sin `name`, usa `__pg_enum_name__` del enum o el nombre de la clase.
    """
    enum_name = name or getattr(enum_cls, "__pg_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return PG_ENUM(
        enum_cls,
        name=enum_name,
        schema=schema,
        create_type=False,
        values_callable=_values,
    )


__all__ = ["Base", "NAMING_CONVENTION", "as_pg_enum"]

# Fin del archivo backend/app/shared/database/base.py
