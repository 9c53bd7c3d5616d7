# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/checkout_schemas.py

Esquemas de respuesta para iniciar y cancelar un checkout de curso.

Autor: CourseHub
Fecha: 2026-09-06
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CheckoutResponse(BaseModel):
    """
    Resultado de startCheckout.

    - Curso de pago: session_id + checkout_url (nuevo o reanudado).
    - Curso gratuito: free=True, enrollment_id, sin pago.
    """

    success: bool = True
    course_id: int
    payment_id: Optional[int] = Field(default=None, description="ID del Payment local.")
    session_id: Optional[str] = Field(default=None, description="ID de la Checkout Session.")
    checkout_url: Optional[str] = Field(default=None, description="URL hospedada del procesador.")
    status: str = Field(description="Estado del pago, o 'enrolled' para cursos gratuitos.")
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    resumed: bool = Field(default=False, description="True si se reanudó un pago activo existente.")
    free: bool = Field(default=False, description="True si el curso no tiene costo.")
    enrollment_id: Optional[int] = None


class CancelCheckoutResponse(BaseModel):
    success: bool = True
    payment_id: int
    status: str


__all__ = ["CheckoutResponse", "CancelCheckoutResponse"]

# Fin del archivo backend/app/modules/payments/schemas/checkout_schemas.py
