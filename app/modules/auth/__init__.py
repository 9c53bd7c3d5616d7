# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/__init__.py

Auth package public API (consumidor de JWT bearer).

Expone:
- dependencies (get_current_user, require_admin)
- security (create_access_token para tests y herramientas)
"""

from .dependencies import CurrentUser, get_current_user, require_admin, validate_jwt_token
from .security import create_access_token, decode_access_token

__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_admin",
    "validate_jwt_token",
    "create_access_token",
    "decode_access_token",
]
# Fin del archivo backend/app/modules/auth/__init__.py
