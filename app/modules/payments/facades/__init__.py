# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/__init__.py

Punto de entrada del paquete de fachadas del módulo Payments.

Para evitar dependencias circulares este __init__ NO importa
submódulos; cada facade se importa desde su paquete:

      from app.modules.payments.facades.checkout import start_checkout
      from app.modules.payments.facades.payments import refund_payment
      from app.modules.payments.facades.webhooks import verify_and_handle_webhook

Autor: CourseHub
Fecha: 2026-09-10
"""

__all__: list[str] = []

# Fin del archivo backend/app/modules/payments/facades/__init__.py
