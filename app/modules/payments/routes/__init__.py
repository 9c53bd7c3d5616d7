# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/__init__.py

Ensamblador de rutas del módulo Payments (montado bajo /api).

Incluye:
- /payments/checkout/{course_id}
- /payments/checkout/{course_id}/cancel
- /payments/status/{session_id}
- /payments/history
- /payments/admin/refund/{payment_id}
- /payments/admin/all
- /payments/webhook

Autor: CourseHub
Fecha: 2026-09-10
"""

from fastapi import APIRouter

from .checkout import router as checkout_router
from .status import router as status_router
from .refunds import router as refunds_router
from .admin import router as admin_router
from .webhooks import router as webhooks_router

router = APIRouter()

# Prefijo común /payments para todas las rutas del módulo
router.include_router(checkout_router, prefix="/payments")
router.include_router(status_router, prefix="/payments")
router.include_router(refunds_router, prefix="/payments")
router.include_router(admin_router, prefix="/payments")
router.include_router(webhooks_router, prefix="/payments")

__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/__init__.py
