# backend/tests/shared/test_config_loader.py
# -*- coding: utf-8 -*-
"""
get_settings: clase de settings según PYTHON_ENV y validaciones de
producción.
"""

import pytest

from app.shared.config.config_loader import get_settings
from app.shared.config.settings_prod import ProdSettings
from app.shared.config.settings_testing import EnvTestingSettings


@pytest.fixture
def env(monkeypatch):
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_test_environment_disables_scheduler(env):
    settings = get_settings()

    assert isinstance(settings, EnvTestingSettings)
    assert settings.scheduler_enabled is False


def test_production_uses_json_logs_and_ssl(env):
    env.setenv("PYTHON_ENV", "production")
    env.setenv("JWT_SECRET_KEY", "x" * 48)

    settings = get_settings()

    assert isinstance(settings, ProdSettings)
    assert settings.log_format == "json"
    assert settings.db_sslmode == "require"


def test_production_rejects_weak_jwt_secret(env):
    env.setenv("PYTHON_ENV", "production")
    env.setenv("JWT_SECRET_KEY", "short")

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        get_settings()
