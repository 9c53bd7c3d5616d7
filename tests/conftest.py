# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests para CourseHub.

- Entorno de pruebas (PYTHON_ENV=test) antes de importar la app
- JSONB de PostgreSQL compilado como JSON en SQLite
- Engine SQLite en archivo temporal por test, con BEGIN IMMEDIATE
  para serializar transacciones concurrentes como lo haría el lock
  de fila en PostgreSQL
- Catálogo de cursos de prueba
"""

import os

os.environ["PYTHON_ENV"] = "test"
os.environ.setdefault("EMAIL_MODE", "console")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-for-coursehub-suite-0123456789")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import NullPool

from app.shared.config.settings_payments import PaymentsSettings
from app.shared.database.base import Base

# Registro de tablas en Base.metadata
import app.modules.courses.models  # noqa: F401
import app.modules.enrollments.models  # noqa: F401
import app.modules.payments.models  # noqa: F401
from app.modules.courses.models import Course


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


# -----------------------------------------------------------------------------
# Catálogo de prueba
# -----------------------------------------------------------------------------
COURSE_PAID = 7          # 99.99 USD
COURSE_FREE = 8          # 0.00
COURSE_INACTIVE = 9
COURSE_LIMITED = 10      # cupo 1
COURSE_BAD_CURRENCY = 11
COURSE_TOO_CHEAP = 12


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'coursehub_test.db'}",
        poolclass=NullPool,
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session
        if session.in_transaction():
            await session.rollback()


@pytest.fixture
async def courses(session_factory):
    async with session_factory() as session:
        session.add_all(
            [
                Course(id=COURSE_PAID, title="Python para análisis de datos", price=Decimal("99.99"), currency="USD"),
                Course(id=COURSE_FREE, title="Introducción a Git", price=Decimal("0.00"), currency="USD"),
                Course(id=COURSE_INACTIVE, title="Curso archivado", price=Decimal("49.00"), is_active=False),
                Course(id=COURSE_LIMITED, title="Taller en vivo", price=Decimal("20.00"), max_students=1),
                Course(id=COURSE_BAD_CURRENCY, title="Curso en pesos", price=Decimal("500.00"), currency="MXN"),
                Course(id=COURSE_TOO_CHEAP, title="Micro lección", price=Decimal("0.10"), currency="USD"),
            ]
        )
        await session.commit()
    return {
        "paid": COURSE_PAID,
        "free": COURSE_FREE,
        "inactive": COURSE_INACTIVE,
        "limited": COURSE_LIMITED,
        "bad_currency": COURSE_BAD_CURRENCY,
        "too_cheap": COURSE_TOO_CHEAP,
    }


@pytest.fixture
def payments_settings() -> PaymentsSettings:
    return PaymentsSettings(
        stripe_secret_key="sk_test_coursehub",
        stripe_webhook_secret="whsec_test_coursehub",
        frontend_url="https://app.coursehub.test",
        payments_idempotency_salt="test-salt",
    )
