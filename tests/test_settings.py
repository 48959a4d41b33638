"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sqlbind.settings import SqlBindSettings


class TestSqlBindSettings:
    def test_defaults(self, env_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SQLBIND_DIALECT", raising=False)
        monkeypatch.delenv("SQLBIND_NULL_SENSITIVE", raising=False)
        s = SqlBindSettings()
        assert s.dialect == "postgresql"
        assert s.null_sensitive is False
        assert s.log_level == "INFO"
        assert s.log_json is None

    def test_environment(self, env_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SQLBIND_DIALECT", "ORACLE")
        monkeypatch.setenv("SQLBIND_NULL_SENSITIVE", "true")
        s = SqlBindSettings()
        assert s.dialect == "oracle"
        assert s.null_sensitive is True

    def test_dotenv(self, env_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SQLBIND_DIALECT", raising=False)
        env_file.write_text("SQLBIND_DIALECT=sqlite\nSQLBIND_LOG_JSON=false\nOTHER=1\n")
        s = SqlBindSettings()
        assert s.dialect == "sqlite"
        assert s.log_json is False

    def test_unknown_dialect(self, env_file: Path) -> None:
        with pytest.raises(ValidationError, match="Unknown dialect"):
            SqlBindSettings(dialect="mssql")
