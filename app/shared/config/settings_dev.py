# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_dev.py

Overrides para entorno de DESARROLLO usando Pydantic v2.
Hereda de BaseAppSettings y ajusta únicamente valores del ambiente local.

Autor: CourseHub
Fecha: 2026-09-02
"""

from typing import Literal

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    """Configuración para entorno de desarrollo."""

    python_env: Literal["development", "test", "production"] = "development"

    # Logging legible en consola
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    log_format: Literal["json", "plain"] = "plain"

    # En desarrollo no se requiere SSL
    db_sslmode: str = "disable"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["DevSettings"]

# Fin del archivo backend/app/shared/config/settings_dev.py
