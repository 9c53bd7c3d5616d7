# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/status.py

Consultas de pagos del usuario autenticado.

Endpoints:
- GET /payments/status/{session_id}  fila del ledger + estado en vivo del procesador
- GET /payments/history              historial paginado

Ambas rutas son de solo lectura.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config import get_settings
from app.shared.database.database import get_async_session
from app.modules.auth.dependencies import CurrentUser, get_current_user
from app.modules.payments.dependencies import StripeGateway, get_stripe_gateway
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.facades.payments import get_payment_status, list_payment_history
from app.modules.payments.schemas import ErrorResponse, PaymentHistoryResponse, PaymentStatusResponse

router = APIRouter(tags=["payments:status"])


@router.get(
    "/status/{session_id}",
    response_model=PaymentStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def payment_status(
    session_id: str,
    session: AsyncSession = Depends(get_async_session),
    user: CurrentUser = Depends(get_current_user),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> PaymentStatusResponse:
    """
    Estado del pago asociado a una Checkout Session.

    Si el procesador no responde, gateway=null y se devuelve solo el ledger.
    """
    return await get_payment_status(
        session,
        user_id=user.user_id,
        session_id=session_id,
        gateway=gateway,
    )


@router.get("/history", response_model=PaymentHistoryResponse)
async def payment_history(
    status: Optional[PaymentStatus] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_async_session),
    user: CurrentUser = Depends(get_current_user),
) -> PaymentHistoryResponse:
    settings = get_settings()
    page_size = min(limit or settings.page_size_default, settings.page_size_max)
    return await list_payment_history(
        session,
        user_id=user.user_id,
        status=status,
        limit=page_size,
        offset=offset,
    )


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/status.py
