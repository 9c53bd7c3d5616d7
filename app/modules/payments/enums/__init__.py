# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Autor: CourseHub
Fecha: 2026-09-03
"""

from .payment_status_enum import PaymentStatus, NON_TERMINAL_STATUSES, TERMINAL_STATUSES

__all__ = [
    "PaymentStatus",
    "NON_TERMINAL_STATUSES",
    "TERMINAL_STATUSES",
]

# Fin del archivo backend/app/modules/payments/enums/__init__.py
