# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/payments/__init__.py

Fachadas de consulta y reembolso de pagos.

Autor: CourseHub
Fecha: 2026-09-10
"""

from .refunds import refund_payment
from .status import get_payment_status
from .history import list_all_payments, list_payment_history

__all__ = [
    "refund_payment",
    "get_payment_status",
    "list_payment_history",
    "list_all_payments",
]

# Fin del archivo backend/app/modules/payments/facades/payments/__init__.py
