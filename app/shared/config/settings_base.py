# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_base.py

Base de configuración (Pydantic v2) para CourseHub.
- Esta clase NO instancia singletons; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.
- La configuración específica de pagos vive en settings_payments.py.

Autor: CourseHub
Fecha: 2026-09-02
"""

from typing import Literal, Optional
from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="CourseHub", validation_alias="APP_NAME")
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="coursehub", validation_alias="DB_NAME")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_sslmode: str = Field(default="prefer", validation_alias="DB_SSLMODE")  # prefer|require|disable
    db_command_timeout_s: float = Field(default=5.0, validation_alias="DB_COMMAND_TIMEOUT_S")
    db_use_null_pool: bool = Field(default=False, validation_alias="DB_USE_NULL_POOL")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        URL de conexión para SQLAlchemy async.
        Prioriza DB_URL (normalizando el esquema postgres) y si no existe
        la construye desde los componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # CORS / Frontend
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    frontend_url: str = Field(default="http://localhost:3000", validation_alias="FRONTEND_URL")

    # =========================
    # Auth / JWT
    # =========================
    jwt_secret_key: SecretStr = Field(default=SecretStr("please-change-me"), validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: Literal["HS256", "RS256"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # =========================
    # Email
    # =========================
    email_mode: Literal["console", "api"] = Field(default="console", validation_alias="EMAIL_MODE")
    email_timeout_sec: int = Field(default=30, validation_alias="EMAIL_TIMEOUT_SEC")
    support_email: str = Field(default="soporte@coursehub.dev", validation_alias="SUPPORT_EMAIL")

    # MailerSend API (solo aplica si email_mode == "api")
    mailersend_api_key: Optional[SecretStr] = Field(default=None, validation_alias="MAILERSEND_API_KEY")
    mailersend_from_email: Optional[str] = Field(default=None, validation_alias="MAILERSEND_FROM_EMAIL")
    mailersend_from_name: Optional[str] = Field(default="CourseHub", validation_alias="MAILERSEND_FROM_NAME")

    # =========================
    # Paginación
    # =========================
    page_size_default: int = Field(20, validation_alias="DEFAULT_PAGE_SIZE")
    page_size_max: int = Field(100, validation_alias="MAX_PAGE_SIZE")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "plain"] = Field(default="plain", validation_alias="LOG_FORMAT")

    # =========================
    # Scheduler
    # =========================
    scheduler_enabled: bool = Field(default=True, validation_alias="SCHEDULER_ENABLED")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    def get_cors_origins(self) -> list[str]:
        """Convierte allowed_origins en lista procesable para CORS middleware."""
        if not self.allowed_origins or self.allowed_origins == "*":
            return ["*"]
        return [o.strip().strip('"').strip("'") for o in self.allowed_origins.split(",") if o.strip()]

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de seguridad y coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        jwt_key = self.jwt_secret_key.get_secret_value()
        weak_jwt = not jwt_key or jwt_key == "please-change-me" or len(jwt_key) < 32

        if self.is_prod:
            if weak_jwt:
                raise ValueError("JWT_SECRET_KEY debe tener ≥32 caracteres en producción")
            if self.db_sslmode != "require":
                raise ValueError("DB_SSLMODE debe ser 'require' en producción")

        if self.is_dev and weak_jwt:
            logger.info("ℹ️ JWT_SECRET_KEY es débil o usa valor por defecto")

        if self.email_mode == "api":
            if not self.mailersend_api_key or not self.mailersend_from_email:
                raise ValueError("EMAIL_MODE=api requiere MAILERSEND_API_KEY y MAILERSEND_FROM_EMAIL.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo backend/app/shared/config/settings_base.py
