# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/repositories/__init__.py

Autor: CourseHub
Fecha: 2026-09-04
"""

from .enrollment_repository import EnrollmentRepository

__all__ = ["EnrollmentRepository"]
