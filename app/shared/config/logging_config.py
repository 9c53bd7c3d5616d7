# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Logging centralizado de CourseHub: formato plain en desarrollo y JSON
(python-json-logger) en producción. Los campos pasados en extra
(payment_id, event_id, request_id) aparecen como claves del registro JSON.

Autor: CourseHub
Fecha: 2026-09-02
"""

import logging.config
from typing import Literal

# SDKs cuyo nivel DEBUG/INFO solo agrega ruido
_QUIET_LOGGERS = ("stripe", "apscheduler", "httpx")


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "json"] = "plain",
) -> None:
    formatter = "json" if fmt == "json" else "plain"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                    "rename_fields": {"levelname": "level", "name": "logger"},
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            "root": {"handlers": ["console"], "level": level.upper()},
        }
    )


__all__ = ["setup_logging"]
# Fin del archivo backend/app/shared/config/logging_config.py
