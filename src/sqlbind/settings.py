"""Environment-driven defaults for sqlbind.

``SqlBindSettings`` reads ``SQLBIND_*`` environment variables (and a
``.env`` file) so deployments can pick the dialect and write behaviour
without code changes::

    SQLBIND_DIALECT=oracle
    SQLBIND_NULL_SENSITIVE=true
    SQLBIND_LOG_LEVEL=DEBUG

Examples:
    >>> from sqlbind.settings import SqlBindSettings
    >>> s = SqlBindSettings(dialect="sqlite")
    >>> s.dialect
    'sqlite'
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlbind.dialect import get_dialect


class SqlBindSettings(BaseSettings):
    """Configuration for :meth:`sqlbind.db.DB.from_settings`.

    Fields
    ──────
    dialect        : Placeholder dialect name (postgresql, oracle, sqlite)
    null_sensitive : Write ``None`` fields as NULL instead of skipping them
    log_level      : structlog log level
    log_json       : JSON log output; ``None`` auto-detects from the tty
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLBIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dialect: str = Field(default="postgresql", description="Placeholder dialect")
    null_sensitive: bool = False

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        get_dialect(value)
        return value.lower()
