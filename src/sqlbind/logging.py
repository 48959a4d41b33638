"""
Structured logging for sqlbind.

sqlbind logs through structlog: every generated statement is emitted at
debug level as an ``sql.execute`` / ``sql.query`` event carrying the SQL
text and its arguments, and transaction boundaries as ``tx.begin`` /
``tx.commit`` / ``tx.rollback``. Applications that already configure
structlog need nothing from this module; :func:`configure_logging` is a
convenience for scripts and tests.

Examples:
    >>> from sqlbind.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("sql.execute", sql="DELETE FROM t WHERE id=$1", args=[1])

Tags:
    logging, structlog, sqlbind
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_format: bool | None = None) -> None:
    """Route sqlbind events through structlog.

    Args:
        level: Minimum level to emit (DEBUG shows every statement)
        json_format: True for JSON lines, False for the console renderer,
            None for JSON unless stdout is a tty
    """
    if json_format is None:
        json_format = not sys.stdout.isatty()

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_settings(settings: Any) -> None:
    """Configure logging from a :class:`~sqlbind.settings.SqlBindSettings`."""
    configure_logging(level=settings.log_level, json_format=settings.log_json)


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
]
