
# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/payment_event_models.py

Conjunto de eventos de webhook ya procesados (por provider_event_id).

Sirve para observabilidad y para garantizar efectos secundarios
exactamente-una-vez (p. ej. no enviar dos correos de confirmación).

Autor: CourseHub
Fecha: 2026-09-03
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    String,
    Integer,
    ForeignKey,
    DateTime,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base

if TYPE_CHECKING:
    from .payment_models import Payment


class PaymentEvent(Base):
    __tablename__ = "payment_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # NULL cuando el evento no corresponde a ningún pago local
    payment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    provider_event_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        doc="ID del evento en el procesador (evt_...).",
    )

    event_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Tipo de evento (checkout.session.completed, ...).",
    )

    outcome: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        doc="Resultado del procesamiento (ok, noop, ignored).",
    )

    payload_json: Mapped[Optional[dict]] = mapped_column(
        JSONB,
        nullable=True,
        doc="Subconjunto normalizado del payload.",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    payment: Mapped[Optional["Payment"]] = relationship(
        "Payment",
        back_populates="events",
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<PaymentEvent id={self.id} type={self.event_type} outcome={self.outcome}>"

# Fin del archivo backend/app/modules/payments/models/payment_event_models.py
