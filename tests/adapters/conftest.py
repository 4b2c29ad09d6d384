"""Shared fixtures for CLI adapter tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def quiet_loggers():
    """Return a patcher silencing both loggers of a CLI module."""

    def _patch(monkeypatch, module) -> MagicMock:
        logger = MagicMock()
        monkeypatch.setattr(module, "get_app_logger", lambda: logger)
        monkeypatch.setattr(module, "get_usage_logger", lambda: MagicMock())
        return logger

    return _patch
