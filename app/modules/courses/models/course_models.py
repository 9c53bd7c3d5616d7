# -*- coding: utf-8 -*-
"""
backend/app/modules/courses/models/course_models.py

Modelo ORM de cursos (tabla `courses`).

Campos relevantes para checkout:
- price / currency: precio en unidades mayores (DECIMAL(10,2))
- is_active: cursos inactivos no se pueden comprar
- max_students: cupo opcional (NULL = sin límite)

Autor: CourseHub
Fecha: 2026-09-03
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_students: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    @property
    def is_free(self) -> bool:
        return (self.price or Decimal("0")) <= 0

    def __repr__(self) -> str:
        return f"<Course id={self.id} title={self.title!r} price={self.price} {self.currency}>"


__all__ = ["Course"]

# Fin del archivo backend/app/modules/courses/models/course_models.py
