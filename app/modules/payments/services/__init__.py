# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.

Incluye:
- ReconciliationService (motor de conciliación pago → inscripción)
- PaymentEventService (registro idempotente de eventos del procesador)
- PaymentNotifier (emails posteriores al commit)

Autor: CourseHub
Fecha: 2026-09-08
"""

from .notification_service import PaymentNotifier, wait_for_pending_notifications
from .payment_event_service import PaymentEventService
from .reconciliation_service import ReconciliationService

__all__ = [
    "PaymentNotifier",
    "PaymentEventService",
    "ReconciliationService",
    "wait_for_pending_notifications",
]
