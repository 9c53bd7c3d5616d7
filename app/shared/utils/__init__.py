# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/__init__.py

Utilidades comunes.

Autor: CourseHub
Fecha: 2026-09-03
"""

from .json_response import UTF8JSONResponse, json_response_utf8

__all__ = ["UTF8JSONResponse", "json_response_utf8"]
