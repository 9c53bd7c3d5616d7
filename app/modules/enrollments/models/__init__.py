# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/models/__init__.py

Autor: CourseHub
Fecha: 2026-09-04
"""

from .enrollment_models import Enrollment

__all__ = ["Enrollment"]
