"""SQLite connection configuration."""

import sqlite3
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlchain.adapters.sqlite.driver import SqliteConnection, SqliteDriver
from sqlchain.exceptions import ConnectionError
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConfig:
    """Connection bootstrap for the bundled SQLite driver."""

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(self, *, connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None) -> None:
        """Initialize SQLite configuration.

        ``":memory:"`` or a missing database is rewritten to a private
        in-memory URI. ``isolation_level`` defaults to ``None``.

        Args:
            connection_config: Keyword arguments for :func:`sqlite3.connect`.
        """
        config: dict[str, Any] = dict(connection_config or {})
        if "database" not in config or config["database"] == ":memory:":
            config["database"] = f"file:memory_{uuid.uuid4().hex}?mode=memory&cache=private"
            config["uri"] = True
        elif str(config["database"]).startswith("file:") and not config.get("uri"):
            logger.debug(
                "Database URI detected (%s) but uri=True not set. Auto-enabling URI mode.", config["database"]
            )
            config["uri"] = True
        config.setdefault("isolation_level", None)
        self.connection_config = config

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection.

        Raises:
            ConnectionError: If the database cannot be opened.

        Returns:
            The open connection.
        """
        try:
            return sqlite3.connect(**self.connection_config)
        except sqlite3.Error as e:
            msg = f"Could not connect to SQLite database {self.connection_config.get('database')!r}: {e}"
            raise ConnectionError(msg) from e

    @contextmanager
    def provide_connection(self) -> "Generator[SqliteConnection, None, None]":
        """Provide a SQLite connection, closed on exit."""
        connection = self.create_connection()
        try:
            yield connection
        finally:
            connection.close()

    @contextmanager
    def provide_session(self) -> "Generator[SqliteDriver, None, None]":
        """Provide a SQLite driver session.

        Yields:
            SqliteDriver: A driver bound to a fresh connection.
        """
        with self.provide_connection() as connection:
            yield self.driver_type(connection)
