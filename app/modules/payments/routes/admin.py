# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/admin.py

Consulta administrativa de pagos.

Endpoint:
- GET /payments/admin/all  listado paginado con filtros opcionales
  user_id, course_id y status

Solo lectura; requiere rol admin.

Autor: CourseHub
Fecha: 2026-09-12
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config import get_settings
from app.shared.database.database import get_async_session
from app.modules.auth.dependencies import CurrentUser, require_admin
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.facades.payments import list_all_payments
from app.modules.payments.schemas import AdminPaymentListResponse, ErrorResponse

router = APIRouter(
    prefix="/admin",
    tags=["payments:admin"],
)


@router.get(
    "/all",
    response_model=AdminPaymentListResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_payments_admin(
    user_id: Optional[int] = Query(default=None, ge=1),
    course_id: Optional[int] = Query(default=None, ge=1),
    status: Optional[PaymentStatus] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_async_session),
    admin: CurrentUser = Depends(require_admin),
) -> AdminPaymentListResponse:
    settings = get_settings()
    page_size = min(limit or settings.page_size_default, settings.page_size_max)
    return await list_all_payments(
        session,
        user_id=user_id,
        course_id=course_id,
        status=status,
        limit=page_size,
        offset=offset,
    )


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/admin.py
