# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/common_schemas.py

Esquemas comunes del módulo Payments: envoltura de error y
metadatos de paginación.

Autor: CourseHub
Fecha: 2026-09-06
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    code: str = Field(description="Código estable del error (INVALID_COURSE, ...).")
    message: str = Field(description="Mensaje legible.")
    retryable: Optional[bool] = Field(default=None)
    details: Optional[Dict[str, Any]] = Field(default=None)


class ErrorResponse(BaseModel):
    """Respuesta de error estándar: {"success": false, "error": {...}}."""

    success: bool = False
    error: ErrorBody


class PageMeta(BaseModel):
    """
    Metadatos de paginación para respuestas con listas.
    """

    total: int = Field(ge=0, description="Número total de registros.")
    limit: int = Field(ge=1, description="Límite de registros por página.")
    offset: int = Field(ge=0, description="Offset actual de la consulta.")
    page: int = Field(ge=1, description="Página actual (1-based).")
    pages: int = Field(ge=0, description="Número total de páginas.")

    @classmethod
    def build(cls, *, total: int, limit: int, offset: int) -> "PageMeta":
        return cls(
            total=total,
            limit=limit,
            offset=offset,
            page=offset // limit + 1,
            pages=(total + limit - 1) // limit,
        )


__all__ = ["ErrorBody", "ErrorResponse", "PageMeta"]

# Fin del archivo backend/app/modules/payments/schemas/common_schemas.py
