# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/webhooks.py

Webhook de Stripe para el checkout de cursos.

Endpoint:
- POST /payments/webhook

Contrato con el procesador:
- Firma inválida o ausente → 400 INVALID_SIGNATURE (Stripe no reintenta)
- Evento procesado, duplicado, no-op o ignorado → 200
- Error inesperado → 500 (Stripe reintenta con backoff)

El body se lee crudo: la firma se calcula sobre los bytes exactos.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.payments.dependencies import (
    StripeGateway,
    get_reconciliation_service,
    get_stripe_gateway,
)
from app.modules.payments.errors import PaymentError
from app.modules.payments.facades.webhooks import verify_and_handle_webhook
from app.modules.payments.schemas import ErrorResponse
from app.modules.payments.services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments:webhooks"])


@router.post(
    "/webhook",
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}},
)
async def stripe_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    engine: ReconciliationService = Depends(get_reconciliation_service),
) -> Dict[str, Any]:
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")

    try:
        result = await verify_and_handle_webhook(
            session,
            raw_body=raw_body,
            signature=signature,
            gateway=gateway,
            engine=engine,
        )
    except PaymentError:
        raise
    except Exception as e:
        logger.exception("Stripe webhook processing error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "webhook_processing_failed"},
        ) from e

    return {"success": True, **result}


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/webhooks.py
