# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/__init__.py

Punto de entrada de repositorios del módulo Payments.

Incluye:
- PaymentRepository
- PaymentEventRepository

Autor: CourseHub
Fecha: 2026-09-04
"""

from .payment_repository import PaymentRepository
from .payment_event_repository import PaymentEventRepository

__all__ = [
    "PaymentRepository",
    "PaymentEventRepository",
]

# Fin del archivo backend/app/modules/payments/repositories/__init__.py
