# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/json_response.py

Respuestas JSON con charset UTF-8 explícito.

- UTF8JSONResponse: default_response_class de la app
- json_response_utf8: helper para handlers de excepciones

Autor: CourseHub
Fecha: 2026-09-03
"""

from typing import Any, Dict, Optional
from fastapi.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    """JSONResponse con Content-Type: application/json; charset=utf-8."""
    media_type = "application/json; charset=utf-8"


def json_response_utf8(
    content: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> UTF8JSONResponse:
    return UTF8JSONResponse(
        content=content,
        status_code=status_code,
        headers=headers,
    )


__all__ = ["UTF8JSONResponse", "json_response_utf8"]
