# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/errors.py

Taxonomía de errores del módulo Payments.

Cada error expone:
- code: identificador estable (lo consume el frontend en error.code)
- http_status: código HTTP cuando se expone por la Session API
- retryable: si el cliente puede reintentar la misma operación

INVALID_TRANSITION es interno: el motor de conciliación lo convierte
en un no-op exitoso al procesar webhooks.

Autor: CourseHub
Fecha: 2026-09-04
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PaymentError(Exception):
    """Error base de pagos."""

    code: str = "PAYMENT_ERROR"
    http_status: int = 400
    retryable: bool = False
    default_message: str = "Payment error"

    def __init__(self, message: Optional[str] = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.retryable:
            error["retryable"] = True
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}


class InvalidCourseError(PaymentError):
    code = "INVALID_COURSE"
    http_status = 404
    default_message = "Course not found or not available for purchase"


class CourseFullError(PaymentError):
    code = "COURSE_FULL"
    http_status = 409
    default_message = "Course has reached maximum capacity"


class AlreadyEnrolledError(PaymentError):
    code = "ALREADY_ENROLLED"
    http_status = 409
    default_message = "User is already enrolled in this course"


class AlreadyActiveError(PaymentError):
    """Ya existe un pago created/pending para (user, course)."""

    code = "ALREADY_ACTIVE"
    http_status = 409
    default_message = "A pending payment already exists for this course"

    def __init__(self, message: Optional[str] = None, *, payment_id: Optional[int] = None, **details: Any) -> None:
        if payment_id is not None:
            details["payment_id"] = payment_id
        super().__init__(message, **details)
        self.payment_id = payment_id


class NotCancelableError(PaymentError):
    code = "NOT_CANCELABLE"
    http_status = 409
    default_message = "Only payments that were not yet submitted can be canceled"


class PaymentNotFoundError(PaymentError):
    code = "PAYMENT_NOT_FOUND"
    http_status = 404
    default_message = "Payment not found"


class InvalidAmountError(PaymentError):
    code = "INVALID_AMOUNT"
    http_status = 422
    default_message = "Amount is outside the allowed range"


class InvalidCurrencyError(PaymentError):
    code = "INVALID_CURRENCY"
    http_status = 422
    default_message = "Currency not supported"


class InvalidSignatureError(PaymentError):
    code = "INVALID_SIGNATURE"
    http_status = 400
    default_message = "Webhook signature verification failed"


class InvalidTransitionError(PaymentError):
    """El estado actual del pago no está en los estados de origen esperados."""

    code = "INVALID_TRANSITION"
    http_status = 409
    default_message = "Payment is not in a state that allows this operation"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        payment_id: Optional[int] = None,
        current_status: Optional[str] = None,
        target_status: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if payment_id is not None:
            details["payment_id"] = payment_id
        if current_status is not None:
            details["current_status"] = str(current_status)
        if target_status is not None:
            details["target_status"] = str(target_status)
        super().__init__(message, **details)
        self.payment_id = payment_id
        self.current_status = current_status
        self.target_status = target_status


class GatewayUnavailableError(PaymentError):
    code = "GATEWAY_UNAVAILABLE"
    http_status = 503
    retryable = True
    default_message = "Payment processor is temporarily unavailable"


class RefundExceedsCapturedError(PaymentError):
    code = "REFUND_EXCEEDS_CAPTURED"
    http_status = 422
    default_message = "Refund amount exceeds the captured amount"


class RefundsDisabledError(PaymentError):
    code = "REFUNDS_DISABLED"
    http_status = 403
    default_message = "Refunds are disabled"


__all__ = [
    "PaymentError",
    "InvalidCourseError",
    "CourseFullError",
    "AlreadyEnrolledError",
    "AlreadyActiveError",
    "NotCancelableError",
    "PaymentNotFoundError",
    "InvalidAmountError",
    "InvalidCurrencyError",
    "InvalidSignatureError",
    "InvalidTransitionError",
    "GatewayUnavailableError",
    "RefundExceedsCapturedError",
    "RefundsDisabledError",
]

# Fin del archivo backend/app/modules/payments/errors.py
