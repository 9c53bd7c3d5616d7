# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/providers/__init__.py

Clientes de procesadores de pago.

Autor: CourseHub
Fecha: 2026-09-05
"""

from .stripe_gateway import (
    CheckoutSessionResult,
    GatewaySessionState,
    RefundResult,
    StripeGateway,
    get_stripe_gateway,
    to_minor_units,
    from_minor_units,
)

__all__ = [
    "CheckoutSessionResult",
    "GatewaySessionState",
    "RefundResult",
    "StripeGateway",
    "get_stripe_gateway",
    "to_minor_units",
    "from_minor_units",
]

# Fin del archivo backend/app/modules/payments/providers/__init__.py
