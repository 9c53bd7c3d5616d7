# -*- coding: utf-8 -*-
"""
backend/app/modules/courses/__init__.py

Catálogo de cursos (solo lectura desde checkout).

El CRUD de cursos vive fuera de este backend; aquí solo se consulta
precio, moneda, disponibilidad y cupo para iniciar un checkout.

Autor: CourseHub
Fecha: 2026-09-03
"""

from .models import Course
from .repositories import CourseRepository

__all__ = ["Course", "CourseRepository"]

# Fin del archivo backend/app/modules/courses/__init__.py
