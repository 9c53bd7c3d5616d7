# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollments/__init__.py

Módulo Enrollments: registro de inscripciones (user, course).

Las inscripciones de cursos de pago solo se escriben desde el motor de
conciliación de Payments, en la misma transacción que el pago.

Autor: CourseHub
Fecha: 2026-09-04
"""

from .enums import EnrollmentStatus, EnrollmentPaymentStatus
from .models import Enrollment
from .repositories import EnrollmentRepository

__all__ = [
    "EnrollmentStatus",
    "EnrollmentPaymentStatus",
    "Enrollment",
    "EnrollmentRepository",
]

# Fin del archivo backend/app/modules/enrollments/__init__.py
