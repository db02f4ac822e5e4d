import contextlib
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.exceptions import ExecutionError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteDriver")

SqliteConnection = sqlite3.Connection


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous driver for the standard library ``sqlite3`` module.

    Transactions are driven by explicit ``BEGIN`` statements, so the
    connection is expected to run with ``isolation_level=None``.
    """

    dialect = "sqlite"

    def with_cursor(self, connection: "SqliteConnection") -> "SqliteCursor":
        return SqliteCursor(connection)

    @contextmanager
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "Generator[None, None, None]":
        """Wrap SQLite errors in :class:`~sqlchain.exceptions.ExecutionError`."""
        try:
            yield
        except sqlite3.Error as e:
            self.record_error(str(e))
            raise ExecutionError(str(e), sql) from e

    def begin(self) -> None:
        """Begin a database transaction."""
        with self.handle_database_exceptions("BEGIN"):
            self.connection.execute("BEGIN")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions("ROLLBACK"):
            self.connection.rollback()

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions("COMMIT"):
            self.connection.commit()
