"""Logging helpers for sqlchain.

Every logger lives under the ``sqlchain`` namespace. Statement and cache
events attach their SQL text through :func:`statement_fields` so the JSON
formatter can emit it as a separate key.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlchain._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Iterable
    from logging import LogRecord

__all__ = (
    "ROOT_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "statement_fields",
)

ROOT_LOGGER_NAME = "sqlchain"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlchain_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag every record logged from the current context; ``None`` clears the tag."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


def statement_fields(sql: str | None, **fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a record about one SQL statement.

    Usage::

        logger.debug("Fetching", extra=statement_fields(sql, shape="mapping"))
    """
    payload = {key: value for key, value in fields.items() if value is not None}
    if sql is not None:
        payload["sql"] = sql
    return {"extra_fields": payload}


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.lineno}",
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


class CorrelationIDFilter(logging.Filter):
    """Copy the context correlation id onto each record."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``sqlchain`` namespace.

    Args:
        name: Dotted suffix such as ``"core.cache"``. Names that already start
            with ``sqlchain`` are used as given; ``None`` returns the root logger.

    Returns:
        The logger, with a single :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        full_name = ROOT_LOGGER_NAME
    elif name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(full_name)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    extra_handlers: Iterable[logging.Handler] | None = None,
) -> None:
    """Install handlers on the ``sqlchain`` root logger.

    Args:
        level: Level name, case-insensitive.
        format_style: ``"structured"`` for JSON lines, anything else for plain text.
        extra_handlers: Handlers added after the stdout handler, formatters untouched.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)
    for extra in extra_handlers or ():
        root.addHandler(extra)
    # records stay out of the application's root logger once configured
    root.propagate = False
