
# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/__init__.py

Modelos ORM del módulo Payments:
- Payment
- PaymentEvent

Autor: CourseHub
Fecha: 2026-09-03
"""

from __future__ import annotations

from .payment_models import Payment
from .payment_event_models import PaymentEvent


__all__ = [
    "Payment",
    "PaymentEvent",
]

# Fin del archivo backend/app/modules/payments/models/__init__.py
