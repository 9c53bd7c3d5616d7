# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/security.py

Seguridad de la Session API:
- Esquema OAuth2 (Bearer)
- Creación / decodificación de JWT (emitidos por el servicio de identidad)

La configuración (secret, algoritmo, expiración) se lee de settings en
cada llamada para respetar el entorno activo.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt  # pip install "python-jose[cryptography]"

from app.shared.config.config_loader import get_settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class TokenDecodeError(Exception):
    """Error al decodificar/validar un token JWT."""


def _jwt_config() -> tuple[str, str, int]:
    settings = get_settings()
    return (
        settings.jwt_secret_key.get_secret_value(),
        settings.jwt_algorithm,
        settings.access_token_expire_minutes,
    )


def create_access_token(
    subject: Union[str, int],
    expires_delta: Optional[timedelta] = None,
    **extra: Any,
) -> str:
    """
    Crea un JWT con claim 'sub' y claims opcionales en `extra`
    (p. ej. role="admin", email="...").
    """
    secret, algorithm, expire_minutes = _jwt_config()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=expire_minutes))
    to_encode: Dict[str, Any] = {"sub": str(subject), "iat": int(now.timestamp()), "exp": int(expire.timestamp())}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida un JWT. Lanza TokenDecodeError si es inválido/expirado.
    """
    secret, algorithm, _ = _jwt_config()
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        raise TokenDecodeError("Token inválido o expirado") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).strip():
        raise TokenDecodeError("Token sin 'sub'")
    return payload


__all__ = [
    "oauth2_scheme",
    "TokenDecodeError",
    "create_access_token",
    "decode_access_token",
]
# Fin del archivo
