# -*- coding: utf-8 -*-
"""
backend/app/modules/courses/models/__init__.py

Autor: CourseHub
Fecha: 2026-09-03
"""

from .course_models import Course

__all__ = ["Course"]
