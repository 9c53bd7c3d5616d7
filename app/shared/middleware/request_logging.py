# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/request_logging.py

Logging de requests HTTP: método, path, status y duración.

Autor: CourseHub
Fecha: 2026-09-11
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, List, Optional, Pattern

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .exception_handler import get_request_id

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Loguea el fin de cada request con su duración.

    Args:
        app: ASGI app
        exclude_patterns: regex de paths a omitir (default: /health)
    """

    DEFAULT_EXCLUDE = [
        re.compile(r"^/health"),
        re.compile(r"^/favicon\.ico"),
    ]

    def __init__(self, app, exclude_patterns: Optional[List[Pattern]] = None):
        super().__init__(app)
        self.exclude_patterns = exclude_patterns or self.DEFAULT_EXCLUDE

    def _should_log(self, path: str) -> bool:
        return not any(pattern.match(path) for pattern in self.exclude_patterns)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not self._should_log(path):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None) or get_request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            logger.info(
                "request_completed request_id=%s method=%s path=%s status=%d duration_ms=%.2f",
                request_id,
                request.method,
                path,
                status,
                (time.perf_counter() - start) * 1000,
            )


__all__ = ["RequestLoggingMiddleware"]

# Fin del archivo backend/app/shared/middleware/request_logging.py
