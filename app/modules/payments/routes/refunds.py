# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/refunds.py

Reembolsos administrativos.

Endpoint:
- POST /payments/admin/refund/{payment_id}

Body opcional {amount, reason}; sin amount se reembolsa el remanente
capturado. Primero se ejecuta el reembolso en el procesador y después
se registra la transición en el ledger.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings
from app.shared.database.database import get_async_session
from app.modules.auth.dependencies import CurrentUser, require_admin
from app.modules.payments.dependencies import (
    StripeGateway,
    get_reconciliation_service,
    get_settings_dep,
    get_stripe_gateway,
)
from app.modules.payments.facades.payments import refund_payment
from app.modules.payments.schemas import ErrorResponse, RefundRequest, RefundResponse
from app.modules.payments.services.reconciliation_service import ReconciliationService

router = APIRouter(
    prefix="/admin",
    tags=["payments:refunds"],
)


@router.post(
    "/refund/{payment_id}",
    response_model=RefundResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def admin_refund(
    payment_id: int = Path(..., ge=1),
    payload: Optional[RefundRequest] = Body(default=None),
    session: AsyncSession = Depends(get_async_session),
    admin: CurrentUser = Depends(require_admin),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    engine: ReconciliationService = Depends(get_reconciliation_service),
    settings: PaymentsSettings = Depends(get_settings_dep),
) -> RefundResponse:
    payload = payload or RefundRequest()
    return await refund_payment(
        session,
        payment_id=payment_id,
        amount=payload.amount,
        reason=payload.reason,
        gateway=gateway,
        engine=engine,
        admin_user_id=admin.user_id,
        settings=settings,
    )


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/refunds.py
