from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.exceptions import ExecutionError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("GenericDriver",)


class GenericDriver(SyncDriverAdapterBase):
    """A generic driver for DB-API 2.0 compliant connections.

    Args:
        connection: An open DB-API connection, e.g. from ``pymysql.connect``.
        dialect: sqlglot dialect used to quote string literals.
        error_types: Exception classes raised by the DB-API module, usually
            ``module.Error``. Anything else propagates unchanged.
    """

    def __init__(
        self,
        connection: Any,
        dialect: str = "mysql",
        error_types: "tuple[type[BaseException], ...]" = (Exception,),
    ) -> None:
        super().__init__(connection)
        self.dialect = dialect
        self.error_types = error_types

    @contextmanager
    def with_cursor(self, connection: Any) -> "Generator[Any, None, None]":
        cur = connection.cursor()
        try:
            yield cur
        finally:
            cur.close()

    @contextmanager
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "Generator[None, None, None]":
        try:
            yield
        except ExecutionError:
            raise
        except self.error_types as e:
            message = e.args[-1] if e.args and isinstance(e.args[-1], str) else str(e)
            self.record_error(message)
            raise ExecutionError(message, sql) from e

    def begin(self) -> None:
        """Begin a transaction with an explicit ``START TRANSACTION``."""
        self.execute_raw("START TRANSACTION")

    def rollback(self) -> None:
        with self.handle_database_exceptions("ROLLBACK"):
            self.connection.rollback()

    def commit(self) -> None:
        with self.handle_database_exceptions("COMMIT"):
            self.connection.commit()
