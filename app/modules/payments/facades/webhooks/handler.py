# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/handler.py

Función de alto nivel para verificar y manejar webhooks desde rutas HTTP.

1. Verifica la firma sobre el body crudo (antes de parsear JSON)
2. Normaliza el evento
3. Delega en el motor de conciliación

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.errors import InvalidSignatureError
from .normalize import WebhookNormalizationError, normalize_stripe_event

if TYPE_CHECKING:
    from app.modules.payments.providers.stripe_gateway import StripeGateway
    from app.modules.payments.services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


async def verify_and_handle_webhook(
    session: AsyncSession,
    *,
    raw_body: bytes,
    signature: Optional[str],
    gateway: "StripeGateway",
    engine: "ReconciliationService",
) -> Dict[str, Any]:
    """
    Raises:
        InvalidSignatureError: firma ausente/inválida o evento malformado.
    """
    data = gateway.verify_webhook_signature(raw_body, signature)

    try:
        event = normalize_stripe_event(data)
    except WebhookNormalizationError as e:
        logger.warning("Malformed Stripe event: %s", e)
        raise InvalidSignatureError("Invalid webhook payload") from e

    logger.info("Stripe webhook received: %s (%s)", event.event_type, event.event_id)
    return await engine.handle_event(session, event)


__all__ = ["verify_and_handle_webhook"]

# Fin del archivo backend/app/modules/payments/facades/webhooks/handler.py
