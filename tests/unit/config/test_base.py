"""Tests for base configuration and logging setup."""

import logging
import sys

import pytest
from pydantic import ValidationError

from zoom_relay.config.base import BaseSettings
from zoom_relay.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level, hook = root.handlers[:], root.level, sys.excepthook
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = True
    sys.excepthook = hook


def test_base_settings_default_values(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = BaseSettings(_env_file=None)

    assert settings.ENVIRONMENT == "development"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.PROJECT_NAME == "Zoom Webhook Relay"


def test_base_settings_validation():
    settings = BaseSettings(ENVIRONMENT="production", LOG_LEVEL="WARNING", _env_file=None)
    assert settings.ENVIRONMENT == "production"
    assert settings.LOG_LEVEL == "WARNING"

    with pytest.raises(ValidationError):
        BaseSettings(ENVIRONMENT="staging", _env_file=None)

    with pytest.raises(ValidationError):
        BaseSettings(LOG_LEVEL="TRACE", _env_file=None)


def test_setup_logging_configures_root(restore_logging):
    setup_logging(BaseSettings(LOG_LEVEL="DEBUG", _env_file=None))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert sys.excepthook is not sys.__excepthook__


def test_setup_logging_uses_single_formatter(restore_logging):
    setup_logging(BaseSettings(_env_file=None))

    console = [
        h for h in logging.getLogger().handlers if h.name == "console"
    ]
    assert console
    assert console[0].formatter._fmt == (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
