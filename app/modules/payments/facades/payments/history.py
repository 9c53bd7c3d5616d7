# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/payments/history.py

Listados paginados de pagos: historial del usuario y vista admin con
filtros por usuario, curso y estado.

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.schemas import (
    AdminPaymentListResponse,
    AdminPaymentOut,
    PageMeta,
    PaymentHistoryResponse,
    PaymentOut,
)


async def list_payment_history(
    session: AsyncSession,
    *,
    user_id: int,
    status: Optional[PaymentStatus] = None,
    limit: int = 20,
    offset: int = 0,
    payment_repo: Optional[PaymentRepository] = None,
) -> PaymentHistoryResponse:
    payment_repo = payment_repo or PaymentRepository()
    items, total = await payment_repo.list_by_user(
        session,
        user_id,
        status=status,
        limit=limit,
        offset=offset,
    )
    return PaymentHistoryResponse(
        items=[PaymentOut.model_validate(p) for p in items],
        meta=PageMeta.build(total=total, limit=limit, offset=offset),
    )


async def list_all_payments(
    session: AsyncSession,
    *,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
    status: Optional[PaymentStatus] = None,
    limit: int = 20,
    offset: int = 0,
    payment_repo: Optional[PaymentRepository] = None,
) -> AdminPaymentListResponse:
    payment_repo = payment_repo or PaymentRepository()
    items, total = await payment_repo.list_payments(
        session,
        user_id=user_id,
        course_id=course_id,
        status=status,
        limit=limit,
        offset=offset,
    )
    return AdminPaymentListResponse(
        items=[AdminPaymentOut.model_validate(p) for p in items],
        meta=PageMeta.build(total=total, limit=limit, offset=offset),
    )


__all__ = ["list_payment_history", "list_all_payments"]

# Fin del archivo backend/app/modules/payments/facades/payments/history.py
