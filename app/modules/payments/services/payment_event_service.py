# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/payment_event_service.py

Conjunto de eventos de webhook procesados.

Un evento se "reclama" al inicio del procesamiento dentro de la misma
transacción que la transición del pago: si el procesamiento falla se
revierte junto con todo lo demás y el procesador puede reintentar.

Autor: CourseHub
Fecha: 2026-09-08
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.repositories.payment_event_repository import (
    PaymentEventRepository,
)

if TYPE_CHECKING:
    from app.modules.payments.facades.webhooks.normalize import NormalizedWebhook
    from app.modules.payments.models.payment_event_models import PaymentEvent

logger = logging.getLogger(__name__)


class PaymentEventService:
    def __init__(self, event_repo: Optional[PaymentEventRepository] = None) -> None:
        self.event_repo = event_repo or PaymentEventRepository()

    async def is_processed(self, session: AsyncSession, provider_event_id: str) -> bool:
        existing = await self.event_repo.get_by_provider_event_id(session, provider_event_id)
        return existing is not None

    async def claim(
        self,
        session: AsyncSession,
        event: "NormalizedWebhook",
    ) -> Optional["PaymentEvent"]:
        """
        Registra el evento si es nuevo.

        Returns:
            PaymentEvent reclamado, o None si ya fue procesado
            (entrega duplicada, secuencial o concurrente).
        """
        if await self.is_processed(session, event.event_id):
            return None
        return await self.event_repo.claim(
            session,
            provider_event_id=event.event_id,
            event_type=event.event_type,
            payload=event.audit,
        )

    async def complete(
        self,
        session: AsyncSession,
        event: "PaymentEvent",
        *,
        outcome: str,
        payment_id: Optional[int] = None,
    ) -> "PaymentEvent":
        return await self.event_repo.mark_outcome(
            session,
            event,
            outcome=outcome,
            payment_id=payment_id,
        )


__all__ = ["PaymentEventService"]

# Fin del archivo backend/app/modules/payments/services/payment_event_service.py
