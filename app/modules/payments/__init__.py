# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/__init__.py

Módulo de pagos de CourseHub: checkout de cursos con Stripe,
conciliación por webhooks, inscripciones y reembolsos.

Estructura:
- enums: PaymentStatus y su máquina de estados
- models: Payment (ledger) y PaymentEvent (eventos procesados)
- repositories: acceso a datos; transition() es el compare-and-set
- providers: adaptador del SDK de Stripe
- services: motor de conciliación, eventos y notificaciones
- facades: operaciones de alto nivel que consumen las rutas
- routes: API HTTP (/api/payments/*)

Los submódulos se importan explícitamente para evitar ciclos.

Autor: CourseHub
Fecha: 2026-09-04
"""

__all__: list[str] = []

# Fin del archivo backend/app/modules/payments/__init__.py
