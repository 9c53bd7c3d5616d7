# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/validators.py

Validadores de negocio para el flujo de checkout de cursos.

Autor: CourseHub
Fecha: 2026-09-09
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from app.shared.config.settings_payments import PaymentsSettings
from app.modules.payments.errors import InvalidAmountError, InvalidCurrencyError

if TYPE_CHECKING:
    from app.modules.courses.models import Course


def validate_amount(amount: Decimal, settings: PaymentsSettings) -> Decimal:
    value = Decimal(amount)
    if value < settings.min_payment_amount:
        raise InvalidAmountError(
            f"Amount must be at least {settings.min_payment_amount}",
            amount=str(value),
        )
    if value > settings.max_payment_amount:
        raise InvalidAmountError(
            f"Amount cannot exceed {settings.max_payment_amount}",
            amount=str(value),
        )
    return value


def validate_currency(currency: str, settings: PaymentsSettings) -> str:
    if not settings.is_supported_currency(currency):
        raise InvalidCurrencyError(
            currency=currency,
            supported=[c.upper() for c in settings.supported_currencies],
        )
    return currency.upper()


def validate_course_pricing(course: "Course", settings: PaymentsSettings) -> None:
    """Precio y moneda de un curso de pago (price > 0) cobrables por el procesador."""
    validate_amount(course.price, settings)
    validate_currency(course.currency or settings.default_currency, settings)


__all__ = [
    "validate_amount",
    "validate_currency",
    "validate_course_pricing",
]

# Fin del archivo backend/app/modules/payments/facades/checkout/validators.py
