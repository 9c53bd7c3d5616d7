
# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/payment_models.py

Modelo ORM para la tabla payments (un intento de pago por curso).

Restricciones clave:
- external_session_id único (id de Checkout Session del procesador)
- idempotency_key único (una por intento lógico de checkout)
- índice único parcial: a lo sumo un pago created/pending por
  (user_id, course_id)

Autor: CourseHub
Fecha: 2026-09-03
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    ForeignKey,
    Index,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base
from app.modules.payments.enums import PaymentStatus

if TYPE_CHECKING:
    from .payment_event_models import PaymentEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Mismo predicado para PostgreSQL y SQLite (tests)
_ACTIVE_PREDICATE = text("status IN ('created', 'pending')")


class Payment(Base):
    """Intento de pago de un curso (Stripe Checkout)."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Usuarios viven en el servicio de identidad: sin FK local
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        doc="ID del usuario que inicia el checkout.",
    )

    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_pg_enum(),
        nullable=False,
        default=PaymentStatus.CREATED,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Monto en unidades mayores (99.99).",
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    external_session_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        doc="ID de la Checkout Session en el procesador (cs_...).",
    )

    external_payment_intent_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        doc="PaymentIntent asociado (pi_...), conocido al completar la sesión.",
    )

    idempotency_key: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        doc="Clave idempotente enviada al procesador al crear la sesión.",
    )

    checkout_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="URL hospedada para reanudar el checkout.",
    )

    refund_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        doc="Total reembolsado acumulado.",
    )

    failure_code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    failure_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    payment_metadata: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        doc="Datos auxiliares (reembolsos, cancelación, montos reportados).",
    )

    created_at: Mapped[datetime] = mapped_column(
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

    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    failed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    canceled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    events: Mapped[List["PaymentEvent"]] = relationship(
        "PaymentEvent",
        back_populates="payment",
        lazy="noload",
    )

    __table_args__ = (
        Index(
            "uq_payments_active_user_course",
            "user_id",
            "course_id",
            unique=True,
            postgresql_where=_ACTIVE_PREDICATE,
            sqlite_where=_ACTIVE_PREDICATE,
        ),
        Index("ix_payments_user_status", "user_id", "status"),
    )

    @property
    def amount_cents(self) -> int:
        return int((Decimal(self.amount) * 100).quantize(Decimal("1")))

    @property
    def refundable_amount(self) -> Decimal:
        """Monto capturado aún no reembolsado."""
        return Decimal(self.amount) - Decimal(self.refund_amount or 0)

    def __repr__(self) -> str:
        return (
            f"<Payment id={self.id} user={self.user_id} course={self.course_id} "
            f"status={self.status}>"
        )

# Fin del archivo backend/app/modules/payments/models/payment_models.py
