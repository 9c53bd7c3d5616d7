# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/dependencies.py

Dependencias FastAPI del módulo Payments.

Los tests sustituyen get_stripe_gateway y get_reconciliation_service
vía app.dependency_overrides.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

from typing import Optional

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.payments.providers.stripe_gateway import StripeGateway, get_stripe_gateway
from app.modules.payments.services.reconciliation_service import ReconciliationService

_engine: Optional[ReconciliationService] = None


def get_reconciliation_service() -> ReconciliationService:
    """Motor de conciliación compartido (sin estado por request)."""
    global _engine
    if _engine is None:
        _engine = ReconciliationService()
    return _engine


def get_settings_dep() -> PaymentsSettings:
    return get_payments_settings()


__all__ = [
    "StripeGateway",
    "get_stripe_gateway",
    "get_reconciliation_service",
    "get_settings_dep",
]

# Fin del archivo backend/app/modules/payments/dependencies.py
