# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_payments.py

Configuración de checkout, webhooks y reembolsos de cursos.

Descripción:
    Objeto de configuración explícito que se inyecta en los servicios
    de pagos (monedas admitidas, límites, tiempos de expiración, URLs
    de retorno y flags de notificación).

Autor: CourseHub
Fecha: 2026-09-02
"""

from __future__ import annotations

import os
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración del sistema de pagos."""

    # =========================================================================
    # FEATURE FLAGS
    # =========================================================================

    payments_enabled: bool = Field(
        default=True,
        description="Habilita el checkout de cursos de pago"
    )

    refunds_enabled: bool = Field(
        default=True,
        description="Habilita los reembolsos administrativos"
    )

    # =========================================================================
    # STRIPE
    # =========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Stripe secret key (sk_live_... o sk_test_...)"
    )

    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        description="Stripe webhook signing secret (whsec_...)"
    )

    stripe_webhook_tolerance_seconds: int = Field(
        default=300,
        description="Tolerancia de timestamp para firmas de webhook (5 minutos)"
    )

    @field_validator("stripe_secret_key", mode="before")
    @classmethod
    def _load_stripe_secret_key(cls, v: Optional[str]) -> Optional[str]:
        """Fallback a STRIPE_SECRET_KEY si no viene en settings."""
        if v:
            return v
        return os.getenv("STRIPE_SECRET_KEY")

    @field_validator("stripe_webhook_secret", mode="before")
    @classmethod
    def _load_stripe_webhook_secret(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v
        return os.getenv("STRIPE_WEBHOOK_SECRET")

    # =========================================================================
    # FRONTEND URL (redirects de checkout)
    # =========================================================================

    frontend_url: str = Field(
        default="http://localhost:3000",
        description="URL base del frontend para success/cancel de checkout"
    )

    @field_validator("frontend_url", mode="before")
    @classmethod
    def _load_frontend_url(cls, v: Optional[str]) -> str:
        """Fallback a FRONTEND_URL del entorno."""
        value = v or os.getenv("FRONTEND_URL") or "http://localhost:3000"
        return value.rstrip("/")

    # =========================================================================
    # MONEDAS Y LÍMITES
    # =========================================================================

    default_currency: str = Field(
        default="USD",
        description="Moneda por defecto de los cursos"
    )

    supported_currencies: list[str] = Field(
        default_factory=lambda: ["USD", "EUR", "GBP", "CAD", "AUD"],
        description="Monedas aceptadas por el checkout (ISO 4217)"
    )

    min_payment_amount: Decimal = Field(
        default=Decimal("0.50"),
        description="Monto mínimo cobrable (unidades mayores)"
    )

    max_payment_amount: Decimal = Field(
        default=Decimal("10000.00"),
        description="Monto máximo cobrable (unidades mayores)"
    )

    default_refund_reason: str = Field(
        default="requested_by_customer",
        description="Motivo de reembolso enviado al procesador por defecto"
    )

    # =========================================================================
    # TIMEOUTS Y JOBS
    # =========================================================================

    payment_session_timeout_minutes: int = Field(
        default=30,
        description="Minutos tras los cuales un pago 'created' se considera abandonado"
    )

    expire_payments_interval_minutes: int = Field(
        default=5,
        description="Frecuencia del job de expiración de pagos abandonados"
    )

    # =========================================================================
    # SEGURIDAD / IDEMPOTENCIA
    # =========================================================================

    payments_idempotency_salt: str = Field(
        default="",
        description="Salt para endurecer la generación de claves de idempotencia"
    )

    payments_idempotency_hex_length: int = Field(
        default=32,
        description="Longitud del hash hexadecimal para idempotency_key"
    )

    # =========================================================================
    # NOTIFICACIONES
    # =========================================================================

    send_payment_confirmation_email: bool = Field(
        default=True,
        description="Enviar email de confirmación al completar el pago"
    )

    send_refund_notification_email: bool = Field(
        default=True,
        description="Enviar email al procesar un reembolso"
    )

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def is_supported_currency(self, currency: str) -> bool:
        return (currency or "").upper() in {c.upper() for c in self.supported_currencies}


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
]
# Fin del archivo backend/app/shared/config/settings_payments.py
