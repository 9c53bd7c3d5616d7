# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/checkout.py

Rutas de checkout de cursos.

Endpoints:
- POST /payments/checkout/{course_id}         inicia o reanuda el checkout
- POST /payments/checkout/{course_id}/cancel  cancela un pago aún no enviado

Cursos gratuitos: la inscripción se crea directamente y la respuesta
lleva free=true (sin checkout_url).

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings
from app.shared.database.database import get_async_session
from app.modules.auth.dependencies import CurrentUser, get_current_user
from app.modules.payments.dependencies import (
    StripeGateway,
    get_reconciliation_service,
    get_settings_dep,
    get_stripe_gateway,
)
from app.modules.payments.facades.checkout import cancel_pending_checkout, start_checkout
from app.modules.payments.schemas import CancelCheckoutResponse, CheckoutResponse, ErrorResponse
from app.modules.payments.services.reconciliation_service import ReconciliationService

router = APIRouter(
    prefix="/checkout",
    tags=["payments:checkout"],
)

_ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "/{course_id}",
    response_model=CheckoutResponse,
    responses=_ERRORS,
)
async def start_course_checkout(
    course_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_async_session),
    user: CurrentUser = Depends(get_current_user),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    settings: PaymentsSettings = Depends(get_settings_dep),
) -> CheckoutResponse:
    """
    Inicia el checkout de un curso.

    Si ya existe un pago activo para (usuario, curso) se devuelve su
    sesión con resumed=true en lugar de crear otra.
    """
    return await start_checkout(
        session,
        user_id=user.user_id,
        course_id=course_id,
        gateway=gateway,
        settings=settings,
        customer_email=user.email,
    )


@router.post(
    "/{course_id}/cancel",
    response_model=CancelCheckoutResponse,
    responses=_ERRORS,
)
async def cancel_course_checkout(
    course_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_async_session),
    user: CurrentUser = Depends(get_current_user),
    engine: ReconciliationService = Depends(get_reconciliation_service),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> CancelCheckoutResponse:
    """Cancela el pago activo del curso y expira su sesión en el procesador."""
    return await cancel_pending_checkout(
        session,
        user_id=user.user_id,
        course_id=course_id,
        engine=engine,
        gateway=gateway,
    )


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/checkout.py
