# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/payment_event_repository.py

Repositorio para la tabla payment_events.

Responsabilidades:
- Idempotencia de eventos webhook (provider_event_id)
- Registro del resultado de procesamiento
- Listado por payment

Autor: CourseHub
Fecha: 2026-09-04
"""

import logging
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.models.payment_event_models import PaymentEvent

logger = logging.getLogger(__name__)


class PaymentEventRepository(BaseRepository[PaymentEvent]):
    def __init__(self) -> None:
        super().__init__(PaymentEvent)

    # -----------------------------------------------------------
    # Idempotencia: no procesar dos veces el mismo evento
    # -----------------------------------------------------------
    async def get_by_provider_event_id(
        self,
        session: AsyncSession,
        provider_event_id: str,
    ) -> Optional[PaymentEvent]:
        stmt = select(PaymentEvent).where(
            PaymentEvent.provider_event_id == provider_event_id
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def claim(
        self,
        session: AsyncSession,
        *,
        provider_event_id: str,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Optional[PaymentEvent]:
        """
        Inserta el evento como "en proceso" dentro de la transacción actual.

        Devuelve None si otro proceso ya lo registró (entrega duplicada
        concurrente). La fila queda visible para otros solo al hacer
        commit, junto con la transición del pago.
        """
        event = PaymentEvent(
            provider_event_id=provider_event_id,
            event_type=event_type,
            payload_json=payload,
        )
        try:
            async with session.begin_nested():
                session.add(event)
                await session.flush()
        except IntegrityError:
            logger.info("Webhook event %s already claimed by another delivery", provider_event_id)
            return None
        return event

    async def mark_outcome(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        *,
        outcome: str,
        payment_id: Optional[int] = None,
    ) -> PaymentEvent:
        event.outcome = outcome
        if payment_id is not None:
            event.payment_id = payment_id
        await session.flush()
        return event

    # -----------------------------------------------------------
    # Eventos por payment
    # -----------------------------------------------------------
    async def list_by_payment(
        self,
        session: AsyncSession,
        payment_id: int,
    ) -> Sequence[PaymentEvent]:
        stmt = select(PaymentEvent).where(PaymentEvent.payment_id == payment_id)
        stmt = stmt.order_by(PaymentEvent.created_at.asc(), PaymentEvent.id.asc())
        result = await session.execute(stmt)
        return result.scalars().all()


__all__ = ["PaymentEventRepository"]

# Fin del archivo backend/app/modules/payments/repositories/payment_event_repository.py
