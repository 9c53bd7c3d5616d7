# -*- coding: utf-8 -*-
"""
backend/app/modules/courses/repositories/course_repository.py

Lecturas del catálogo de cursos.

Autor: CourseHub
Fecha: 2026-09-03
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.courses.models import Course


class CourseRepository(BaseRepository[Course]):
    def __init__(self) -> None:
        super().__init__(Course)

    async def get_purchasable(self, session: AsyncSession, course_id: int) -> Optional[Course]:
        """Curso existente y activo, o None."""
        course = await self.get(session, course_id)
        if course is None or not course.is_active:
            return None
        return course


__all__ = ["CourseRepository"]

# Fin del archivo backend/app/modules/courses/repositories/course_repository.py
