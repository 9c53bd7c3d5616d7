# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/notification_service.py

Notificaciones de pagos posteriores al commit (best-effort).

El motor de conciliación acumula notificaciones durante la transacción
y solo las despacha después del commit, como tareas asyncio en segundo
plano. Un fallo de envío se registra en logs y nunca revierte estado.

Autor: CourseHub
Fecha: 2026-09-08
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable, Iterable, Optional, Set

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.integrations.email_sender import IPaymentEmailSender, get_email_sender

logger = logging.getLogger(__name__)

Notification = Callable[[], Awaitable[None]]

# Referencias fuertes para que el GC no cancele tareas en curso
_background_tasks: Set[asyncio.Task] = set()


async def _run_notification(name: str, notification: Notification) -> None:
    try:
        await notification()
    except Exception:
        logger.exception("Payment notification '%s' failed", name)


class PaymentNotifier:
    def __init__(
        self,
        sender_factory: Callable[[], IPaymentEmailSender] = get_email_sender,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self._sender_factory = sender_factory
        self._settings = settings or get_payments_settings()

    def payment_confirmed(
        self,
        *,
        to_email: Optional[str],
        payment_id: int,
        course_id: int,
        course_title: str,
        amount: Decimal,
        currency: str,
    ) -> Optional[Notification]:
        if not self._settings.send_payment_confirmation_email:
            return None
        if not to_email:
            logger.info("No customer email for payment %s; skipping confirmation", payment_id)
            return None

        async def _send() -> None:
            sender = self._sender_factory()
            await sender.send_payment_confirmation_email(
                to_email,
                course_id=course_id,
                course_title=course_title,
                amount=amount,
                currency=currency,
                payment_id=payment_id,
            )

        return _send

    def refund_processed(
        self,
        *,
        to_email: Optional[str],
        payment_id: int,
        course_title: str,
        refund_amount: Decimal,
        currency: str,
        full_refund: bool,
    ) -> Optional[Notification]:
        if not self._settings.send_refund_notification_email or not to_email:
            return None

        async def _send() -> None:
            sender = self._sender_factory()
            await sender.send_refund_email(
                to_email,
                course_title=course_title,
                refund_amount=refund_amount,
                currency=currency,
                payment_id=payment_id,
                full_refund=full_refund,
            )

        return _send

    def dispatch(self, notifications: Iterable[Optional[Notification]]) -> int:
        """Lanza las notificaciones como tareas en segundo plano. Llamar tras commit."""
        scheduled = 0
        for notification in notifications:
            if notification is None:
                continue
            name = getattr(notification, "__qualname__", "notification")
            task = asyncio.create_task(_run_notification(name, notification))
            _background_tasks.add(task)
            task.add_done_callback(_background_tasks.discard)
            scheduled += 1
        return scheduled


async def wait_for_pending_notifications(timeout: float = 10.0) -> None:
    """Espera las notificaciones en curso (shutdown y tests)."""
    if not _background_tasks:
        return
    pending = list(_background_tasks)
    done, not_done = await asyncio.wait(pending, timeout=timeout)
    if not_done:
        logger.warning("%d payment notifications still running after %.1fs", len(not_done), timeout)


__all__ = [
    "Notification",
    "PaymentNotifier",
    "wait_for_pending_notifications",
]

# Fin del archivo backend/app/modules/payments/services/notification_service.py
