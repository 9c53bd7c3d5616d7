# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/__init__.py

Exporta las funciones clave de facades/webhooks.

Autor: CourseHub
Fecha: 2026-09-10
"""

from .normalize import NormalizedWebhook, WebhookNormalizationError, normalize_stripe_event
from .handler import verify_and_handle_webhook

__all__ = [
    "NormalizedWebhook",
    "WebhookNormalizationError",
    "normalize_stripe_event",
    "verify_and_handle_webhook",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/__init__.py
