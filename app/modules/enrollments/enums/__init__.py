# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/enums/__init__.py

Autor: CourseHub
Fecha: 2026-09-04
"""

from .enrollment_status_enum import EnrollmentStatus, EnrollmentPaymentStatus

__all__ = ["EnrollmentStatus", "EnrollmentPaymentStatus"]
