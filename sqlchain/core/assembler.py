"""SQL text assembly.

Renders an accumulated :class:`~sqlchain.builder._state.BuilderState` into one
statement per statement kind. Trailers are appended only when set and always
in a fixed order.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from sqlchain.exceptions import SQLBuilderError
from sqlchain.utils.type_guards import is_mapping_sequence

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlchain.builder._state import BuilderState
    from sqlchain.typing import StatementParameters

__all__ = ("MAINTENANCE_VERBS", "READ_STATEMENT_PREFIXES", "SqlAssembler", "bind_placeholders", "is_read_statement")

MAINTENANCE_VERBS: Final = frozenset({"ANALYZE", "CHECK", "CHECKSUM", "OPTIMIZE", "REPAIR"})
READ_STATEMENT_PREFIXES: Final = ("select", "optimize", "check", "repair", "checksum", "analyze")


def is_read_statement(sql: str) -> bool:
    """Check whether a statement returns a result set worth fetching and caching."""
    return sql.lstrip().lower().startswith(READ_STATEMENT_PREFIXES)


def bind_placeholders(text: str, values: "Sequence[Any]", escape: "Callable[[Any], str]") -> str:
    """Substitute positional ``?`` placeholders left to right.

    Placeholders without a matching value are left blank.

    Args:
        text: SQL text containing ``?`` placeholders.
        values: Ordered values for the placeholders.
        escape: Literal escaper.

    Returns:
        The bound SQL text.
    """
    segments = text.split("?")
    parts = [segments[0]]
    for index, segment in enumerate(segments[1:]):
        parts.append(escape(values[index]) if index < len(values) else "")
        parts.append(segment)
    return "".join(parts)


class SqlAssembler:
    """Render builder state into SQL statements."""

    __slots__ = ("_escape",)

    def __init__(self, escape: "Callable[[Any], str]") -> None:
        self._escape = escape

    @staticmethod
    def _require_table(state: "BuilderState") -> str:
        if not state.from_clause:
            msg = "No table selected. Call table() before a terminal operation."
            raise SQLBuilderError(msg)
        return state.from_clause

    @staticmethod
    def _render_limit(state: "BuilderState") -> str:
        if state.limit is None:
            return ""
        if state.limit_end is not None:
            return f" LIMIT {state.limit}, {state.limit_end}"
        return f" LIMIT {state.limit}"

    def _render_trailer(self, state: "BuilderState") -> str:
        """WHERE, ORDER BY and LIMIT shared by UPDATE and DELETE."""
        trailer = ""
        where = state.where.render()
        if where is not None:
            trailer += f" WHERE {where}"
        if state.order_by is not None:
            trailer += f" ORDER BY {state.order_by}"
        return trailer + self._render_limit(state)

    def select(self, state: "BuilderState") -> str:
        """Render a SELECT statement."""
        query = f"SELECT {state.select_list} FROM {self._require_table(state)}"
        if state.join_clauses:
            query += " " + " ".join(state.join_clauses)
        where = state.where.render()
        if where is not None:
            query += f" WHERE {where}"
        if state.group_by is not None:
            query += f" GROUP BY {state.group_by}"
        having = state.having.render()
        if having is not None:
            query += f" HAVING {having}"
        if state.order_by is not None:
            query += f" ORDER BY {state.order_by}"
        query += self._render_limit(state)
        if state.offset is not None:
            query += f" OFFSET {state.offset}"
        return query

    def insert(self, state: "BuilderState", data: "Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]") -> str:
        """Render an INSERT statement.

        A sequence of mappings renders one VALUES tuple per mapping, with the
        column list taken from the first mapping.

        Raises:
            SQLBuilderError: If there is nothing to insert.
        """
        table = self._require_table(state)
        rows: "Sequence[Mapping[str, Any]]"
        if isinstance(data, Mapping):
            rows = [data]
        elif is_mapping_sequence(data):
            rows = data
        else:
            rows = []
        if not rows or not rows[0]:
            msg = "insert() requires a non-empty mapping or a sequence of mappings."
            raise SQLBuilderError(msg)
        columns = ", ".join(rows[0].keys())
        values = ", ".join("(" + ", ".join(self._escape(value) for value in row.values()) + ")" for row in rows)
        return f"INSERT INTO {table} ({columns}) VALUES {values}"

    def update(self, state: "BuilderState", data: "Mapping[str, Any]", raw_values: bool = False) -> str:
        """Render an UPDATE statement.

        With ``raw_values`` the right-hand sides are inserted verbatim.

        Raises:
            SQLBuilderError: If there is nothing to set.
        """
        table = self._require_table(state)
        if not data:
            msg = "update() requires at least one column."
            raise SQLBuilderError(msg)
        query = f"UPDATE {table}"
        if state.join_clauses:
            query += " " + " ".join(state.join_clauses)
        assignments = ",".join(
            f"{column}={value if raw_values else self._escape(value)}" for column, value in data.items()
        )
        return f"{query} SET {assignments}" + self._render_trailer(state)

    def increment(self, state: "BuilderState", field: str, count: int, operator: Optional[str] = None) -> str:
        """Render an in-place arithmetic UPDATE on one column."""
        table = self._require_table(state)
        query = f"UPDATE {table} SET `{field}` = `{field}`{operator or '+'}{int(count)}"
        return query + self._render_trailer(state)

    def replace(self, state: "BuilderState", field: str, search: str, replacement: str) -> str:
        """Render a string REPLACE over one column."""
        table = self._require_table(state)
        query = (
            f"UPDATE {table} SET `{field}` = REPLACE(`{field}`, {self._escape(search)}, {self._escape(replacement)})"
        )
        where = state.where.render()
        if where is not None:
            query += f" WHERE {where}"
        return query

    def delete(self, state: "BuilderState") -> str:
        """Render a DELETE statement.

        Without a WHERE clause the statement becomes ``TRUNCATE TABLE``.
        """
        table = self._require_table(state)
        if not state.where:
            return f"TRUNCATE TABLE {table}"
        return f"DELETE FROM {table}" + self._render_trailer(state)

    def maintenance(self, state: "BuilderState", verb: str) -> str:
        """Render a table-maintenance statement such as ``OPTIMIZE TABLE``."""
        verb = verb.upper()
        if verb not in MAINTENANCE_VERBS:
            msg = f"Unsupported table maintenance verb: {verb}"
            raise SQLBuilderError(msg)
        return f"{verb} TABLE {self._require_table(state)}"

    def describe(self, state: "BuilderState") -> str:
        return f"DESCRIBE {self._require_table(state)}"

    def show_columns(self, state: "BuilderState", field: str) -> str:
        return f"SHOW COLUMNS FROM {self._require_table(state)} WHERE Field = {self._escape(field)}"

    def raw(self, text: str, params: "StatementParameters" = None) -> str:
        """Bind positional parameters into caller-supplied SQL."""
        return bind_placeholders(text, params or (), self._escape)
