# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/error_handlers.py

Traduce PaymentError al sobre JSON de la API:

    {"success": false, "error": {"code": "...", "message": "..."}}

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from app.shared.utils.json_response import json_response_utf8
from app.modules.payments.errors import PaymentError

logger = logging.getLogger(__name__)


async def payment_error_handler(request: Request, exc: PaymentError):
    if exc.http_status >= 500:
        logger.warning(
            "payment_error code=%s path=%s message=%s",
            exc.code,
            request.url.path,
            exc.message,
        )
    else:
        logger.info("payment_error code=%s path=%s", exc.code, request.url.path)

    headers = {"Retry-After": "5"} if exc.retryable else None
    return json_response_utf8(exc.to_dict(), status_code=exc.http_status, headers=headers)


def register_payment_error_handlers(app: FastAPI) -> None:
    """Registra el handler de PaymentError (y subclases) en la app."""
    app.add_exception_handler(PaymentError, payment_error_handler)


__all__ = ["payment_error_handler", "register_payment_error_handlers"]

# Fin del archivo backend/app/modules/payments/error_handlers.py
