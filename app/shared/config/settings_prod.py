# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_prod.py

Overrides de PRODUCCIÓN: solo variables de entorno (sin .env), logging
JSON y conexión SSL obligatoria. _security_checks exige además un
JWT_SECRET_KEY fuerte.

Autor: CourseHub
Fecha: 2026-09-02
"""

from typing import Literal

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class ProdSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "production"
    log_format: Literal["json", "plain"] = "json"
    db_sslmode: str = "require"

    model_config = SettingsConfigDict(env_file=None, extra="ignore")


__all__ = ["ProdSettings"]
# Fin del archivo backend/app/shared/config/settings_prod.py
