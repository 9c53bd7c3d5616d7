# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/jobs/__init__.py

Jobs programados del sistema.

Autor: CourseHub
Fecha: 2026-09-12
"""

from .expire_payments_job import expire_stale_payments_job, register_expire_payments_job

__all__ = [
    "expire_stale_payments_job",
    "register_expire_payments_job",
]
