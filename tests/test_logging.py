"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
import sys

import pytest
import structlog

from pyracantha.core.logging import LOG_FORMAT_ENV_VAR, LOG_LEVEL_ENV_VAR, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_FORMAT_ENV_VAR, raising=False)
    yield
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_FORMAT_ENV_VAR, raising=False)
    setup_logging()


def _handler() -> logging.Handler:
    (handler,) = [
        h
        for h in logging.getLogger().handlers
        if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    return handler


def _format(message: str) -> str:
    handler = _handler()
    record = logging.LogRecord("pyracantha.engine", logging.WARNING, __file__, 1, message, None, None)
    return handler.format(record)


class TestSetupLogging:
    def test_default_level_is_warning(self):
        setup_logging()
        assert logging.getLogger("pyracantha").level == logging.WARNING

    def test_explicit_level_overrides_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "error")
        setup_logging("debug")
        assert logging.getLogger("pyracantha").level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "info")
        setup_logging()
        assert logging.getLogger("pyracantha").level == logging.INFO

    def test_writes_to_stderr(self):
        setup_logging()
        assert _handler().stream is sys.stderr

    def test_json_format(self, monkeypatch):
        monkeypatch.setenv(LOG_FORMAT_ENV_VAR, "json")
        setup_logging()
        event = json.loads(_format("scanner.path_skipped"))
        assert event["event"] == "scanner.path_skipped"
        assert event["level"] == "warning"
        assert event["logger"] == "pyracantha.engine"

    def test_console_format(self):
        setup_logging()
        line = _format("scanner.path_skipped")
        assert "scanner.path_skipped" in line
        assert "\x1b[" not in line
