"""Synchronous driver base.

Concrete adapters provide cursor acquisition, exception translation and the
transaction primitives; the fetch and execute flows are shared here.
"""

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.core.result import FetchShape, shape_row, shape_rows
from sqlchain.driver._common import CommonDriverAttributesMixin, ExecutionResult
from sqlchain.utils.logging import get_logger, statement_fields

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger("driver")

__all__ = ("SyncDriverAdapterBase",)


class SyncDriverAdapterBase(CommonDriverAttributesMixin):
    """Base class for blocking DB-API style drivers."""

    __slots__ = ("_last_error", "connection")

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self._last_error: Optional[str] = None

    @abstractmethod
    def with_cursor(self, connection: Any) -> "AbstractContextManager[Any]":
        """Return a context manager yielding a cursor and closing it afterwards."""

    @abstractmethod
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "AbstractContextManager[None]":
        """Return a context manager translating driver errors into :class:`~sqlchain.exceptions.ExecutionError`."""

    @abstractmethod
    def begin(self) -> None:
        """Begin a database transaction on the current connection."""

    @abstractmethod
    def rollback(self) -> None:
        """Rollback the current transaction on the current connection."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the current transaction on the current connection."""

    @property
    def last_error(self) -> Optional[str]:
        """Diagnostic message of the most recent failed statement."""
        return self._last_error

    def record_error(self, message: Optional[str]) -> None:
        self._last_error = message

    def savepoint(self, name: str) -> None:
        self.execute_raw(f"SAVEPOINT {name}")

    def rollback_to(self, name: str) -> None:
        self.execute_raw(f"ROLLBACK TO {name}")

    def fetch(
        self,
        sql: str,
        shape: FetchShape = FetchShape.MAPPING,
        record_type: "Optional[type[Any]]" = None,
        all_rows: bool = True,
    ) -> ExecutionResult:
        """Run a statement that returns rows.

        Args:
            sql: Statement text, with every literal already inlined.
            shape: Row representation to return.
            record_type: Target type for :attr:`FetchShape.RECORD`.
            all_rows: Return every row as a list, or only the first row.

        Returns:
            The shaped rows and the number of rows fetched.
        """
        logger.debug(
            "Fetching %s", "all rows" if all_rows else "one row", extra=statement_fields(sql, shape=shape.value)
        )
        with self.handle_database_exceptions(sql), self.with_cursor(self.connection) as cursor:
            cursor.execute(sql)
            column_names = self.column_names_of(cursor)
            if all_rows:
                fetched: Sequence[Any] = cursor.fetchall()
                rows: Any = shape_rows(fetched, column_names, shape, record_type)
                row_count = len(fetched)
            else:
                first = cursor.fetchone()
                rows = None if first is None else shape_row(first, column_names, shape, record_type)
                row_count = 0 if first is None else 1
        return self.create_execution_result(
            rows, row_count=row_count, column_names=column_names, is_select_result=True
        )

    def execute(self, sql: str) -> ExecutionResult:
        """Run a statement that returns no result set.

        Returns:
            The affected row count and the last generated identifier.
        """
        logger.debug("Executing statement", extra=statement_fields(sql))
        with self.handle_database_exceptions(sql), self.with_cursor(self.connection) as cursor:
            cursor.execute(sql)
            row_count = cursor.rowcount if cursor.rowcount and cursor.rowcount > 0 else 0
            last_insert_id = getattr(cursor, "lastrowid", None)
        return self.create_execution_result(row_count=row_count, last_insert_id=last_insert_id)

    def execute_raw(self, sql: str) -> int:
        """Run a statement and return only the affected row count."""
        return self.execute(sql).row_count

    def close(self) -> None:
        """Close the underlying connection."""
        close = getattr(self.connection, "close", None)
        if close is not None:
            close()
