# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/__init__.py

Jobs programados usando APScheduler.

Autor: CourseHub
Fecha: 2026-09-03
"""

from .scheduler_service import SchedulerService, get_scheduler

__all__ = [
    "SchedulerService",
    "get_scheduler",
]
