# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/payment_status_schemas.py

Esquemas de consulta de pagos: estado de una sesión, historial y
listado administrativo.

Autor: CourseHub
Fecha: 2026-09-06
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_schemas import PageMeta


class PaymentOut(BaseModel):
    """Representación pública de un Payment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    status: str
    amount: Decimal
    currency: str
    external_session_id: Optional[str] = None
    refund_amount: Optional[Decimal] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, value: object) -> str:
        return str(value)


class PaymentStatusResponse(BaseModel):
    """
    Estado de un checkout: fila del ledger + estado en vivo del procesador.

    gateway es None cuando el procesador no respondió.
    """

    success: bool = True
    payment: PaymentOut
    enrollment_status: Optional[str] = Field(default=None)
    enrollment_payment_status: Optional[str] = Field(default=None)
    gateway: Optional[Dict[str, Any]] = Field(default=None)


class PaymentHistoryResponse(BaseModel):
    success: bool = True
    items: List[PaymentOut]
    meta: PageMeta


class AdminPaymentOut(PaymentOut):
    """Vista administrativa: incluye dueño y referencias del procesador."""

    user_id: int
    external_payment_intent_id: Optional[str] = None


class AdminPaymentListResponse(BaseModel):
    success: bool = True
    items: List[AdminPaymentOut]
    meta: PageMeta


__all__ = [
    "PaymentOut",
    "PaymentStatusResponse",
    "PaymentHistoryResponse",
    "AdminPaymentOut",
    "AdminPaymentListResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/payment_status_schemas.py
