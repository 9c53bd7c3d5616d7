# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Los repositorios nunca hacen commit: solo flush. La frontera
transaccional pertenece al servicio que los orquesta.

Autor: CourseHub
Fecha: 2026-09-02
"""

from typing import Any, Type, TypeVar, Generic, Sequence, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para lecturas/escrituras comunes."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # Lecturas
    # -------------------------------------------------------------
    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def list(self, session: AsyncSession) -> Sequence[T]:
        result = await session.execute(select(self.model))
        return result.scalars().all()

    async def count(self, session: AsyncSession, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    # -------------------------------------------------------------
    # Escrituras (flush, sin commit)
    # -------------------------------------------------------------
    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

# Fin del archivo backend/app/shared/database/repository.py
