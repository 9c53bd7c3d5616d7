# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: CourseHub
Fecha: 2026-09-02
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, as_pg_enum
from .database import (
    engine,
    SessionLocal,
    get_async_session,
    get_db,
    session_scope,
    check_database_health,
)
from .repository import BaseRepository

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "NAMING_CONVENTION",
    "as_pg_enum",
    "BaseRepository",
    "get_async_session",
    "get_db",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/shared/database/__init__.py
