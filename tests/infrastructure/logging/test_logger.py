"""Tests for the logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest

from src.infrastructure.logging import logger as logger_module


@pytest.fixture
def dated_logs(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240315"),
    )
    return tmp_path


def _file_handlers(logger: logging.Logger) -> list[logging.FileHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_builder_writes_dated_file_under_subdir(dated_logs):
    """Files land in logs/<subdir>/<stamp>_<prefix>.log."""
    built = (
        logger_module.LoggerBuilder()
        .name("ledger.import.test")
        .subdir("imports")
        .prefix("book_import")
        .console(False)
        .level(logging.DEBUG)
        .build()
    )

    handlers = _file_handlers(built)
    expected = dated_logs / "logs" / "imports" / "20240315_book_import.log"
    assert built.level == logging.DEBUG
    assert built.propagate is False
    assert len(handlers) == 1
    assert handlers[0].baseFilename == str(expected)
    assert not any(
        type(h) is logging.StreamHandler for h in built.handlers
    )


def test_builder_reuses_handlers_on_second_build(dated_logs):
    """Building the same name twice does not stack handlers."""
    builder = (
        logger_module.LoggerBuilder()
        .name("ledger.export.test")
        .subdir("exports")
        .prefix("book_export")
    )

    first = builder.build()
    second = builder.build()

    assert first is second
    assert len(_file_handlers(second)) == 1
    assert len(second.handlers) == 2


def test_builder_uses_injected_factories(dated_logs):
    """Custom formatter and handler factories are honored."""
    fmt = logging.Formatter("%(message)s")
    created = {}

    def _file_factory(path, formatter):
        created["path"] = path
        created["formatter"] = formatter
        return logging.NullHandler()

    built = (
        logger_module.LoggerBuilder()
        .name("ledger.fx.test")
        .subdir("fx")
        .prefix("rates")
        .console(False)
        .formatter(lambda: fmt)
        .file_handler(_file_factory)
        .build()
    )

    assert created["formatter"] is fmt
    assert created["path"].name == "20240315_rates.log"
    assert isinstance(built.handlers[0], logging.NullHandler)


def test_default_handlers_log_info_and_above(tmp_path):
    """Default handlers filter at INFO and apply the formatter."""
    fmt = logger_module.LoggerBuilder._default_formatter()
    file_handler = logger_module.LoggerBuilder._default_file_handler(
        tmp_path / "ledger.log",
        fmt,
    )
    console_handler = logger_module.LoggerBuilder._default_console_handler(fmt)

    assert file_handler.level == logging.INFO
    assert file_handler.formatter is fmt
    assert console_handler.level == logging.INFO
    assert console_handler.formatter is fmt
    file_handler.close()


def test_logger_wrapper_delegates_every_level(monkeypatch):
    """Wrapper methods forward to the built logger."""
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "build",
        lambda self: fake_logger,
    )
    monkeypatch.setattr(logger_module.Logger, "_instance", None)

    wrapper = logger_module.Logger("ledger")
    wrapper.info("imported")
    wrapper.warning("skipped price")
    wrapper.error("rolled back")
    wrapper.debug("inserted rows")
    wrapper.critical("no engine")

    fake_logger.info.assert_called_with("imported")
    fake_logger.warning.assert_called_with("skipped price")
    fake_logger.error.assert_called_with("rolled back")
    fake_logger.debug.assert_called_with("inserted rows")
    fake_logger.critical.assert_called_with("no engine")
    assert logger_module.Logger("other") is wrapper


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch):
    """Each logger family keeps its own instance and destination."""
    seen: list[tuple[str, str]] = []

    def _fake_build(self):
        seen.append((self._subdir, self._prefix))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_one = logger_module.get_app_logger()
    app_two = logger_module.get_app_logger()
    usage = logger_module.get_usage_logger()

    assert app_one is app_two
    assert usage is not app_one
    assert seen == [("app", "ledger"), ("usage", "usage")]
