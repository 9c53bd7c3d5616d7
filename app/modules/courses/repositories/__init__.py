# -*- coding: utf-8 -*-
"""
backend/app/modules/courses/repositories/__init__.py

Autor: CourseHub
Fecha: 2026-09-03
"""

from .course_repository import CourseRepository

__all__ = ["CourseRepository"]
