# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/refund_schemas.py

Esquemas para reembolsos administrativos.

Autor: CourseHub
Fecha: 2026-09-06
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RefundRequest(BaseModel):
    """
    Request para reembolsar un pago desde la API administrativa.

    Si amount se omite, se reembolsa el monto capturado restante.
    """

    amount: Optional[Decimal] = Field(
        default=None,
        description="Monto a reembolsar en la moneda original del pago.",
    )
    reason: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Motivo del reembolso (auditoría).",
    )

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and value <= 0:
            raise ValueError("amount must be > 0")
        return value


class RefundResponse(BaseModel):
    success: bool = True
    payment_id: int
    refund_id: str
    refund_amount: Decimal = Field(description="Monto de este reembolso.")
    total_refunded: Decimal = Field(description="Total reembolsado acumulado.")
    status: str = Field(description="Estado del pago tras el reembolso.")
    full_refund: bool


__all__ = ["RefundRequest", "RefundResponse"]

# Fin del archivo backend/app/modules/payments/schemas/refund_schemas.py
