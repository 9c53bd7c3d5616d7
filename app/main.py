# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend CourseHub.

- .env cargado antes de cualquier import que lea configuración
- Logging vía setup_logging (plain o json según LOG_FORMAT)
- Scheduler con el job de expiración de pagos abandonados
- Handlers de PaymentError y HTTPException con charset UTF-8
- Router maestro: /health y /api/payments/*

Autor: CourseHub
Fecha: 2026-09-11
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que use os.getenv
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_override_env = os.getenv("PYTHON_ENV", "development").strip().lower() == "development"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.shared.config import get_settings, setup_logging
from app.shared.middleware import JSONExceptionMiddleware, RequestLoggingMiddleware
from app.shared.utils.json_response import UTF8JSONResponse, json_response_utf8
from app.modules.payments.error_handlers import register_payment_error_handlers

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    scheduler = None
    if settings.scheduler_enabled:
        from app.shared.scheduler import get_scheduler
        from app.shared.scheduler.jobs import register_expire_payments_job

        scheduler = get_scheduler()
        register_expire_payments_job(scheduler)
        scheduler.start()
        logger.info("Scheduler iniciado con jobs programados")
    else:
        logger.info("Scheduler deshabilitado (SCHEDULER_ENABLED=false)")

    logger.info("Backend de %s iniciado (env=%s)", settings.app_name, settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        if scheduler is not None:
            scheduler.shutdown(wait=True)

        from app.modules.payments.services.notification_service import wait_for_pending_notifications

        await wait_for_pending_notifications(timeout=10.0)

        logger.info("Backend de %s apagado.", settings.app_name)


openapi_tags = [
    {"name": "payments:checkout", "description": "Checkout de cursos"},
    {"name": "payments:status", "description": "Estado e historial de pagos"},
    {"name": "payments:refunds", "description": "Reembolsos administrativos"},
    {"name": "payments:webhooks", "description": "Webhook de Stripe"},
]

app = FastAPI(
    title=f"{settings.app_name} API",
    description="Checkout de cursos, conciliación de pagos e inscripciones",
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
    default_response_class=UTF8JSONResponse,
)

# Orden: el último middleware agregado se ejecuta primero
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(JSONExceptionMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials="*" not in settings.get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION HANDLERS CON UTF-8
# ═══════════════════════════════════════════════════════════════════════════════
register_payment_error_handlers(app)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return json_response_utf8(
        content={"success": False, "detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


from app.routes import router as main_router

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "active"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port, reload=settings.is_dev)

# Fin del archivo backend/app/main.py
