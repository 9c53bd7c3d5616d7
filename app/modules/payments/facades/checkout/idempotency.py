# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/idempotency.py

Clave idempotente de checkout.

sha256(user_id | course_id | día UTC | número de intento | salt)

El número de intento es la cantidad de pagos previos del par
(user, course): dobles clics del mismo intento colapsan en la misma
clave (y el procesador devuelve la misma sesión), mientras que un
reintento tras cancelar o fallar genera una clave nueva.

Autor: CourseHub
Fecha: 2026-09-09
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Optional


def build_idempotency_key(
    user_id: int,
    course_id: int,
    attempt: int,
    *,
    salt: str = "",
    hex_length: int = 32,
    now: Optional[datetime] = None,
) -> str:
    day = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).strftime("%Y-%m-%d")
    raw = f"{user_id}|{course_id}|{day}|{attempt}|{salt}"
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return digest[:hex_length]


__all__ = ["build_idempotency_key"]

# Fin del archivo backend/app/modules/payments/facades/checkout/idempotency.py
