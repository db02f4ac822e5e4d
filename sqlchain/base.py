"""The chainable query builder and its executor."""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from typing_extensions import Self

from sqlchain.builder import QueryBuilder
from sqlchain.config import BuilderConfig
from sqlchain.core.assembler import is_read_statement
from sqlchain.core.cache import FileCache
from sqlchain.core.escape import Escaper
from sqlchain.core.result import FetchShape, count_payload_rows
from sqlchain.exceptions import ExecutionError, ImproperConfigurationError, SQLChainError
from sqlchain.typing import Empty
from sqlchain.utils.logging import get_logger, statement_fields

if TYPE_CHECKING:
    from collections.abc import Callable, Generator, Mapping, Sequence

    from sqlchain.driver import ExecutionResult, SyncDriverAdapterBase
    from sqlchain.typing import DictRow, StatementParameters

__all__ = ("SQLChain",)

logger = get_logger()

INSERT_PREFIXES = ("insert", "replace")

ResultT = TypeVar("ResultT")


class SQLChain(QueryBuilder):
    """Fluent SQL builder bound to a database driver.

    Accumulator calls build up one statement; a terminal call renders it,
    resets the builder and either returns the SQL text (``render_only``) or
    dispatches it, consulting the one-shot result cache for read statements.

    Args:
        driver: Connected driver adapter. The builder owns it and closes it in :meth:`close`.
        config: Table prefix, cache directory and debug mode.
    """

    def __init__(self, driver: "SyncDriverAdapterBase", config: Optional[BuilderConfig] = None) -> None:
        self.config = config or BuilderConfig()
        self.driver = driver
        super().__init__(Escaper(driver.quote), table_prefix=self.config.table_prefix)
        self._query_count = 0
        self._pending_raw: Optional[str] = None

    @classmethod
    def from_sqlite(cls, database: str = ":memory:", config: Optional[BuilderConfig] = None, **params: Any) -> Self:
        """Open a SQLite connection and bind a builder to it.

        Raises:
            ConnectionError: If the database cannot be opened.
        """
        from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver

        connection = SqliteConfig(connection_config={"database": database, **params}).create_connection()
        return cls(SqliteDriver(connection), config)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the driver's connection."""
        self.driver.close()

    @property
    def num_rows(self) -> int:
        """Rows returned or affected by the last statement."""
        return self._state.row_count

    @property
    def insert_id(self) -> Any:
        return self._state.last_insert_id

    @property
    def query_count(self) -> int:
        """Statements dispatched to the driver; cache hits are not counted."""
        return self._query_count

    @property
    def last_query(self) -> Optional[str]:
        return self._state.last_query

    @property
    def last_error(self) -> Optional[str]:
        return self._state.last_error

    def cache(self, ttl: int) -> Self:
        """Cache the result of the next read statement for ``ttl`` seconds.

        The cache applies to the next terminal call only.

        Raises:
            ImproperConfigurationError: If ``ttl`` is negative or the cache
                directory cannot be created.

        Returns:
            The current builder instance for method chaining.
        """
        if ttl < 0:
            msg = f"Cache TTL must not be negative, got {ttl}"
            raise ImproperConfigurationError(msg)
        self._state.active_cache = FileCache(self.config.cache_dir, ttl)
        return self

    def _render_only(self, sql: str) -> str:
        self._state.reset_clauses()
        return sql

    def _begin_statement(self, sql: str) -> str:
        statement = sql.strip()
        self._state.reset()
        self._pending_raw = None
        self._state.last_query = statement
        return statement

    def _dispatch(self, operation: "Callable[..., ResultT]", sql: str, *args: Any) -> ResultT:
        try:
            result = operation(sql, *args)
        except ExecutionError as exc:
            self._report_failure(exc, sql)
            raise
        self._query_count += 1
        return result

    def _report_failure(self, exc: ExecutionError, sql: str) -> None:
        """Record a failed statement and terminate in debug mode."""
        self._state.last_error = exc.driver_message
        logger.error("Query failed: %s", exc.driver_message, extra=statement_fields(sql, debug=self.config.debug))
        if self.config.debug:
            raise SystemExit(f"Query: {sql}\nError: {exc.driver_message}") from exc

    def query(
        self,
        sql: str,
        all_rows: bool = True,
        shape: FetchShape = FetchShape.MAPPING,
        record_type: "Optional[type[Any]]" = None,
    ) -> Any:
        """Dispatch a complete statement.

        Read statements (``SELECT`` and the table-maintenance verbs) are
        fetched in ``shape`` and served from the cache when one is armed.
        Any other statement is executed and its affected row count returned.

        Args:
            sql: Statement text with every literal inlined.
            all_rows: Return every row, or only the first row (or ``None``).
            shape: Row representation of fetched rows.
            record_type: Target type for :attr:`FetchShape.RECORD`.

        Raises:
            ExecutionError: If the driver rejects the statement outside debug mode.

        Returns:
            The fetched rows for read statements, else the affected row count.
        """
        cache = self._state.active_cache
        statement = self._begin_statement(sql)
        if not is_read_statement(statement):
            result: ExecutionResult = self._dispatch(self.driver.execute, statement)
            self._state.row_count = result.row_count
            if statement.lower().startswith(INSERT_PREFIXES):
                self._state.last_insert_id = result.last_insert_id
            return result.row_count

        if not shape.cacheable:
            cache = None
        if cache is not None:
            payload = cache.get(statement, shape, all_rows)
            if payload is not Empty:
                self._state.row_count = count_payload_rows(payload, all_rows)
                return payload

        result = self._dispatch(self.driver.fetch, statement, shape, record_type, all_rows)
        self._state.row_count = result.row_count
        if cache is not None:
            cache.set(statement, result.rows)
        return result.rows

    def get(
        self,
        shape: FetchShape = FetchShape.MAPPING,
        record_type: "Optional[type[Any]]" = None,
        *,
        render_only: bool = False,
    ) -> Any:
        """Fetch the first matching row, or ``None``.

        Forces ``LIMIT 1``. With ``render_only`` the SQL text is returned instead.
        """
        self._state.limit = 1
        self._state.limit_end = None
        sql = self._assembler.select(self._state)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=False, shape=shape, record_type=record_type)

    def get_all(
        self,
        shape: FetchShape = FetchShape.MAPPING,
        record_type: "Optional[type[Any]]" = None,
        *,
        render_only: bool = False,
    ) -> Any:
        """Fetch every matching row as a list.

        With ``render_only`` the SQL text is returned without contacting the driver.
        """
        sql = self._assembler.select(self._state)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=True, shape=shape, record_type=record_type)

    def insert(
        self, data: "Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]", *, render_only: bool = False
    ) -> Any:
        """Insert one row, or several rows in a single statement.

        Returns:
            The identifier generated for the (last) inserted row, or the SQL text.
        """
        sql = self._assembler.insert(self._state, data)
        if render_only:
            return self._render_only(sql)
        self.query(sql, all_rows=False)
        return self._state.last_insert_id

    def update(self, data: "Mapping[str, Any]", *, render_only: bool = False) -> Union[int, str]:
        """Update the matching rows; returns the affected row count or the SQL text."""
        sql = self._assembler.update(self._state, data)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=False)  # type: ignore[no-any-return]

    def increment_field(
        self, field: str, count: int, operator: Optional[str] = None, *, render_only: bool = False
    ) -> Union[int, str]:
        """Apply ``field = field <operator> count`` in place; ``operator`` defaults to ``+``."""
        sql = self._assembler.increment(self._state, field, count, operator)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=False)  # type: ignore[no-any-return]

    def delete(self, *, render_only: bool = False) -> Union[int, str]:
        """Delete the matching rows.

        Without any WHERE condition the table is truncated instead.
        """
        sql = self._assembler.delete(self._state)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=False)  # type: ignore[no-any-return]

    def replace(self, field: str, search: str, replacement: str, *, render_only: bool = False) -> Union[int, str]:
        """Replace every occurrence of ``search`` in a text column."""
        sql = self._assembler.replace(self._state, field, search, replacement)
        if render_only:
            return self._render_only(sql)
        return self.query(sql, all_rows=False)  # type: ignore[no-any-return]

    def _maintenance(self, verb: str) -> Any:
        return self.query(self._assembler.maintenance(self._state, verb), all_rows=False)

    def analyze(self) -> Any:
        return self._maintenance("ANALYZE")

    def check(self) -> Any:
        return self._maintenance("CHECK")

    def checksum(self) -> Any:
        return self._maintenance("CHECKSUM")

    def optimize(self) -> Any:
        return self._maintenance("OPTIMIZE")

    def repair(self) -> Any:
        return self._maintenance("REPAIR")

    def _fetch_direct(self, sql: str, shape: FetchShape, record_type: "Optional[type[Any]]", all_rows: bool) -> Any:
        result: ExecutionResult = self._dispatch(self.driver.fetch, sql, shape, record_type, all_rows)
        self._state.row_count = result.row_count
        return result.rows

    def fields(self) -> "list[Any]":
        """Column names of the selected table (``DESCRIBE``)."""
        statement = self._begin_statement(self._assembler.describe(self._state))
        rows = self._fetch_direct(statement, FetchShape.TUPLE, None, True)
        return [row[0] for row in rows]

    def field_type(self, field: str) -> "list[DictRow]":
        """Column definition rows for one field (``SHOW COLUMNS``)."""
        statement = self._begin_statement(self._assembler.show_columns(self._state, field))
        return self._fetch_direct(statement, FetchShape.MAPPING, None, True)  # type: ignore[no-any-return]

    def raw(self, sql: str, params: "StatementParameters" = None) -> Self:
        """Bind positional ``?`` parameters into a statement for :meth:`exec` or :meth:`fetch`.

        Returns:
            The current builder instance for method chaining.
        """
        statement = self._begin_statement(self._assembler.raw(sql, params))
        self._pending_raw = statement
        return self

    def exec(self) -> Optional[int]:
        """Run the statement bound by :meth:`raw` without a result set.

        Returns:
            The affected row count, or ``None`` when no statement is bound.
        """
        if self._pending_raw is None:
            return None
        result: ExecutionResult = self._dispatch(self.driver.execute, self._pending_raw)
        self._state.row_count = result.row_count
        self._state.last_insert_id = result.last_insert_id
        return result.row_count

    def fetch(self, shape: FetchShape = FetchShape.MAPPING, record_type: "Optional[type[Any]]" = None) -> Any:
        """Run the statement bound by :meth:`raw` and return its first row."""
        if self._pending_raw is None:
            return None
        return self._fetch_direct(self._pending_raw, shape, record_type, False)

    def fetch_all(self, shape: FetchShape = FetchShape.MAPPING, record_type: "Optional[type[Any]]" = None) -> Any:
        """Run the statement bound by :meth:`raw` and return every row."""
        if self._pending_raw is None:
            return None
        return self._fetch_direct(self._pending_raw, shape, record_type, True)

    def _run_control(self, statement: str, operation: "Callable[..., Any]", *args: Any) -> None:
        """Run a transaction-control call through the uniform failure path."""
        try:
            operation(*args)
        except ExecutionError as exc:
            self._report_failure(exc, exc.sql or statement)
            raise

    def transaction(self) -> bool:
        """Open a transaction, or a savepoint named ``trans<depth>`` when one is already open.

        The depth only grows once the driver call succeeded.
        """
        depth = self._state.transaction_depth + 1
        if depth == 1:
            self._run_control("BEGIN", self.driver.begin)
        else:
            self._run_control(f"SAVEPOINT trans{depth}", self.driver.savepoint, f"trans{depth}")
        self._state.transaction_depth = depth
        return True

    def commit(self) -> bool:
        """Close one transaction level; the real commit happens at the outermost level.

        Raises:
            SQLChainError: If no transaction is open.
            ExecutionError: If the driver rejects the commit; the level stays open.
        """
        self._require_transaction("commit")
        if self._state.transaction_depth == 1:
            self._run_control("COMMIT", self.driver.commit)
        self._state.transaction_depth -= 1
        return True

    def rollback(self) -> bool:
        """Undo the innermost transaction level.

        Nested levels roll back to their savepoint; the outermost level rolls
        back the whole transaction.

        Raises:
            SQLChainError: If no transaction is open.
            ExecutionError: If the driver rejects the rollback; the level stays open.
        """
        self._require_transaction("rollback")
        depth = self._state.transaction_depth
        if depth > 1:
            self._run_control(f"ROLLBACK TO trans{depth}", self.driver.rollback_to, f"trans{depth}")
        else:
            self._run_control("ROLLBACK", self.driver.rollback)
        self._state.transaction_depth = depth - 1
        return True

    def _require_transaction(self, operation: str) -> None:
        if self._state.transaction_depth <= 0:
            msg = f"{operation}() called without an open transaction."
            raise SQLChainError(msg)

    @contextmanager
    def atomic(self) -> "Generator[Self, None, None]":
        """Run a block in a transaction level, committing on success and rolling back on error."""
        self.transaction()
        try:
            yield self
        except Exception:
            self.rollback()
            raise
        self.commit()
