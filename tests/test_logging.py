"""Tests for structured logging setup."""

from __future__ import annotations

import json

import pytest
import structlog

from supportwindow.core.logging import setup_logging
from supportwindow.exceptions import ConfigError


class TestSetupLogging:
    def test_json_lines_on_stderr(self, monkeypatch, capsys):
        monkeypatch.setenv("SUPPORTWINDOW_LOG_FORMAT", "json")
        setup_logging("INFO")
        structlog.get_logger("supportwindow.tests").info("engine.evaluated", projects=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "engine.evaluated"
        assert event["projects"] == 2
        assert event["level"] == "info"
        assert event["logger"] == "supportwindow.tests"

    def test_level_filters_debug(self, monkeypatch, capsys):
        monkeypatch.setenv("SUPPORTWINDOW_LOG_FORMAT", "json")
        setup_logging("WARNING")
        structlog.get_logger("supportwindow.tests").debug("policy.skipped")
        assert capsys.readouterr().err == ""

    def test_env_level_overrides_default(self, monkeypatch, capsys):
        monkeypatch.setenv("SUPPORTWINDOW_LOG_LEVEL", "debug")
        monkeypatch.setenv("SUPPORTWINDOW_LOG_FORMAT", "json")
        setup_logging("WARNING")
        structlog.get_logger("supportwindow.tests").debug("policy.skipped")
        assert "policy.skipped" in capsys.readouterr().err

    def test_unknown_level(self, monkeypatch):
        monkeypatch.setenv("SUPPORTWINDOW_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigError, match="SUPPORTWINDOW_LOG_LEVEL"):
            setup_logging()

    def test_unknown_format(self, monkeypatch):
        monkeypatch.setenv("SUPPORTWINDOW_LOG_FORMAT", "xml")
        with pytest.raises(ConfigError, match="must be one of"):
            setup_logging()
