"""
Shared pytest fixtures for sqlbind tests.

This module provides:
- A recording fake DB-API connection for SQL text assertions
- DB instances over it for each dialect
- An in-memory SQLite database with a ``users`` table for round trips
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from sqlbind import DB, get_oracle_db, get_postgres_db, get_sqlite_db
from tests._support.models import FakeConnection

USERS_DDL = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL DEFAULT '',
        email TEXT,
        score REAL,
        avatar BLOB,
        created_by TEXT,
        note TEXT
    )
"""


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark SQLite-backed tests as integration, everything else as unit."""
    for item in items:
        fixtures = getattr(item, "fixturenames", ())
        if "sqlite_conn" in fixtures:
            item.add_marker(pytest.mark.integration)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fake connection fixtures
# =============================================================================


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def pg_db(fake_conn: FakeConnection) -> DB:
    return get_postgres_db(fake_conn)


@pytest.fixture
def oracle_db(fake_conn: FakeConnection) -> DB:
    return get_oracle_db(fake_conn)


# =============================================================================
# SQLite fixtures
# =============================================================================


@pytest.fixture
def sqlite_conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory SQLite connection with a ``users`` table."""
    conn = sqlite3.connect(":memory:")
    conn.execute(USERS_DDL)
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture
def sqlite_db(sqlite_conn: sqlite3.Connection) -> DB:
    return get_sqlite_db(sqlite_conn)


@pytest.fixture
def env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no stray .env is read."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / ".env"
