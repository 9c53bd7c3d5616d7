# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/__init__.py

Punto de entrada para los esquemas Pydantic del módulo Payments.

Autor: CourseHub
Fecha: 2026-09-06
"""

from __future__ import annotations

from .common_schemas import ErrorBody, ErrorResponse, PageMeta
from .checkout_schemas import CheckoutResponse, CancelCheckoutResponse
from .refund_schemas import RefundRequest, RefundResponse
from .payment_status_schemas import (
    AdminPaymentListResponse,
    AdminPaymentOut,
    PaymentHistoryResponse,
    PaymentOut,
    PaymentStatusResponse,
)

__all__ = [
    "ErrorBody",
    "ErrorResponse",
    "PageMeta",
    "CheckoutResponse",
    "CancelCheckoutResponse",
    "RefundRequest",
    "RefundResponse",
    "PaymentOut",
    "PaymentStatusResponse",
    "PaymentHistoryResponse",
    "AdminPaymentOut",
    "AdminPaymentListResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/__init__.py
