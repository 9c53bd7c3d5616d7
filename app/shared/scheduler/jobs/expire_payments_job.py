# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/jobs/expire_payments_job.py

Job programado que cancela pagos 'created' abandonados.

Un pago queda en 'created' cuando el usuario abre el checkout y nunca
envía el formulario del procesador. Pasado payment_session_timeout_minutes
se expira la Checkout Session en Stripe y el pago pasa a 'canceled' por
el mismo compare-and-set del motor de conciliación, liberando el cupo
"un pago activo por (usuario, curso)".

Autor: CourseHub
Fecha: 2026-09-12
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.shared.config.settings_payments import get_payments_settings

logger = logging.getLogger(__name__)

JOB_ID = "payments_expire_stale"


async def expire_stale_payments_job(older_than_minutes: Optional[int] = None) -> Dict[str, Any]:
    """
    Ejecuta una pasada de expiración.

    Returns:
        Dict con el número de pagos cancelados y la duración
    """
    # Imports diferidos: el engine de DB se crea al importar database.py
    from app.shared.database.database import session_scope
    from app.modules.payments.providers.stripe_gateway import get_stripe_gateway
    from app.modules.payments.services.reconciliation_service import ReconciliationService

    start_time = datetime.now(timezone.utc)
    gateway = get_stripe_gateway()
    engine = ReconciliationService()

    try:
        async with session_scope() as session:
            expired = await engine.expire_stale_payments(
                session,
                gateway=gateway if gateway.is_configured else None,
                older_than_minutes=older_than_minutes,
            )
    except Exception as e:
        logger.exception("[expire_payments] run failed: %s", e)
        return {"timestamp": start_time.isoformat(), "expired": 0, "error": str(e)}

    duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    logger.info("[expire_payments] expired=%d duration_ms=%.2f", expired, duration_ms)
    return {
        "timestamp": start_time.isoformat(),
        "expired": expired,
        "duration_ms": round(duration_ms, 2),
    }


def register_expire_payments_job(scheduler) -> str:
    """
    Registra el job en el scheduler con el intervalo configurado
    (expire_payments_interval_minutes).

    Args:
        scheduler: Instancia de SchedulerService

    Returns:
        ID del job registrado
    """
    settings = get_payments_settings()
    scheduler.add_interval_job(
        func=expire_stale_payments_job,
        job_id=JOB_ID,
        minutes=settings.expire_payments_interval_minutes,
    )
    logger.info(
        "[expire_payments] Job '%s' registered: every %d min, timeout %d min",
        JOB_ID,
        settings.expire_payments_interval_minutes,
        settings.payment_session_timeout_minutes,
    )
    return JOB_ID


__all__ = ["JOB_ID", "expire_stale_payments_job", "register_expire_payments_job"]

# Fin del archivo backend/app/shared/scheduler/jobs/expire_payments_job.py
