# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal del backend CourseHub.

Fuerza un event loop compatible con asyncpg en Windows.

Autor: CourseHub
Fecha: 2026-09-02
"""
import sys
import asyncio

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Fin del archivo backend/app/__init__.py
