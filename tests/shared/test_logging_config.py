# backend/tests/shared/test_logging_config.py
# -*- coding: utf-8 -*-
"""
setup_logging: formato plain y JSON (python-json-logger).
"""

import logging

import pytest

from app.shared.config.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _restore_level():
    yield
    setup_logging(level="WARNING", fmt="plain")


def _root_formatters():
    return [h.formatter for h in logging.getLogger().handlers if getattr(h, "formatter", None)]


def test_setup_logging_plain():
    setup_logging(level="DEBUG", fmt="plain")
    logging.getLogger("coursehub.test").debug("hello plain")

    assert logging.getLogger().level == logging.DEBUG
    assert any(isinstance(h, logging.StreamHandler) for h in logging.getLogger().handlers)


def test_setup_logging_json():
    setup_logging(level="INFO", fmt="json")
    logging.getLogger("coursehub.test").info("hello json", extra={"payment_id": 1})

    assert any(f.__class__.__module__.startswith("pythonjsonlogger") for f in _root_formatters())


def test_noisy_sdk_loggers_are_quieted():
    setup_logging(level="DEBUG", fmt="plain")
    assert logging.getLogger("stripe").level == logging.WARNING
