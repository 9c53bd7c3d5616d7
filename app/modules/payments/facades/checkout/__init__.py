# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/__init__.py

Punto de entrada del submódulo de checkout del módulo Payments.

Autor: CourseHub
Fecha: 2026-09-09
"""

from .idempotency import build_idempotency_key
from .start_checkout import start_checkout
from .cancel import cancel_pending_checkout

__all__ = [
    "build_idempotency_key",
    "start_checkout",
    "cancel_pending_checkout",
]

# Fin del archivo backend/app/modules/payments/facades/checkout/__init__.py
