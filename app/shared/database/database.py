# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy async + asyncpg para CourseHub.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker, expire_on_commit=False)
- Dependencias FastAPI: get_async_session / get_db
- context manager: session_scope()
- check_database_health()

Autor: CourseHub
Fecha: 2026-09-02

Notas:
- Las sesiones NO hacen commit implícito: cada servicio decide cuándo
  confirmar su transacción (un solo commit por operación de negocio).
- Ninguna llamada de red externa debe ocurrir con una transacción abierta.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

DB_ECHO_SQL = bool(_settings.db_echo_sql)
DB_COMMAND_TIMEOUT_S = float(_settings.db_command_timeout_s)


def _build_connect_args(url: str) -> dict:
    """connect_args por driver (asyncpg acepta ssl/command_timeout)."""
    if not url.startswith("postgresql+asyncpg"):
        return {}
    args: dict = {"command_timeout": DB_COMMAND_TIMEOUT_S}
    if _settings.db_sslmode == "require":
        args["ssl"] = "require"
    return args


ASYNC_DSN = _settings.database_url

logger.info(
    "[DB] engine → %s:%s/%s (echo=%s, sslmode=%s)",
    _settings.db_host,
    _settings.db_port,
    _settings.db_name,
    DB_ECHO_SQL,
    _settings.db_sslmode,
)

engine = create_async_engine(
    ASYNC_DSN,
    poolclass=NullPool if _settings.db_use_null_pool else None,
    echo=DB_ECHO_SQL,
    connect_args=_build_connect_args(ASYNC_DSN),
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencias FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # rollback para liberar locks antes de propagar
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# Alias usado por routers y overrides de tests
get_db = get_async_session


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Sesión para jobs/scripts; commit/rollback quedan a cargo del llamador."""
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] health check failed: %s", e)
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "get_async_session",
    "get_db",
    "session_scope",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py
