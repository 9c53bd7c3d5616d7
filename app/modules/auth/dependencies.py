# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/dependencies.py

Dependencias de autenticación JWT para FastAPI.

Provee:
- validate_jwt_token: valida el token y construye CurrentUser
- get_current_user: dependencia con oauth2_scheme
- require_admin: exige role=admin en el token

Autor: CourseHub
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status

from .security import oauth2_scheme, decode_access_token, TokenDecodeError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    is_admin: bool = False
    email: Optional[str] = None


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "invalid_token", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_jwt_token(token: str) -> CurrentUser:
    """
    Valida un JWT y extrae el usuario.

    Raises:
        HTTPException 401: token inválido, expirado o con 'sub' no numérico.
    """
    try:
        payload = decode_access_token(token)
    except TokenDecodeError as e:
        raise _unauthorized(str(e)) from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise _unauthorized("Token does not contain a valid user identifier") from e

    role = payload.get("role") or ""
    return CurrentUser(
        user_id=user_id,
        is_admin=str(role).lower() == ADMIN_ROLE,
        email=payload.get("email"),
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
) -> CurrentUser:
    return validate_jwt_token(token)


async def require_admin(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Raises:
        HTTPException 403: el usuario no es admin
    """
    if not user.is_admin:
        logger.warning("Admin access denied for user %s", user.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Admin access required"},
        )
    return user


__all__ = [
    "CurrentUser",
    "get_current_user",
    "validate_jwt_token",
    "require_admin",
]
