# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS usando Pydantic v2.
Determinista: logging moderado, SQLite en memoria y sin scheduler.

Autor: CourseHub
Fecha: 2026-09-02
"""

from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class EnvTestingSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "test"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "plain"] = "plain"

    # Las pruebas de repositorio usan su propio engine; este solo evita asyncpg
    db_url: Optional[str] = "sqlite+aiosqlite:///:memory:"
    db_sslmode: str = "disable"

    jwt_secret_key: SecretStr = SecretStr("test-secret-for-coursehub-suite-0123456789")

    scheduler_enabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/app/shared/config/settings_testing.py
