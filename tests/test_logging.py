"""Tests for structlog configuration helpers."""

from __future__ import annotations

import json
from collections.abc import Generator

import pytest
import structlog
from structlog.testing import capture_logs

from sqlbind.logging import configure_logging, configure_logging_from_settings, get_logger
from sqlbind.settings import SqlBindSettings


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="DEBUG", json_format=True)
        structlog.get_logger("t").debug("sql.execute", sql="SELECT 1")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "sql.execute"
        assert record["sql"] == "SELECT 1"
        assert record["level"] == "debug"
        assert "timestamp" in record

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="WARNING", json_format=True)
        structlog.get_logger("t").debug("sql.execute", sql="SELECT 1")
        assert "sql.execute" not in capsys.readouterr().out

    def test_from_settings(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging_from_settings(SqlBindSettings(log_level="ERROR", log_json=True))
        log = structlog.get_logger("t")
        log.warning("tx.begin_failed")
        log.error("boom")
        out = capsys.readouterr().out
        assert "tx.begin_failed" not in out
        assert "boom" in out


class TestGetLogger:
    def test_named_logger_emits(self) -> None:
        with capture_logs() as logs:
            get_logger("sqlbind.test").info("tx.commit", attempt=1)
        assert logs == [{"event": "tx.commit", "attempt": 1, "log_level": "info"}]
