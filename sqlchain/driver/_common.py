"""Common driver attributes shared by the synchronous driver base."""

from typing import Any, NamedTuple, Optional

from mypy_extensions import trait
from sqlglot import exp

from sqlchain.utils.logging import get_logger

__all__ = ("CommonDriverAttributesMixin", "ExecutionResult")

logger = get_logger("driver")


class ExecutionResult(NamedTuple):
    """Outcome of one dispatched statement.

    Attributes:
        rows: Shaped rows for fetches (a list, one row, or None), None for
            statements without a result set.
        row_count: Rows returned by a fetch, or rows affected by a mutation.
        last_insert_id: Identifier generated by the statement, when any.
        column_names: Column names of the result set, empty for mutations.
        is_select_result: Whether the statement was run as a fetch.
    """

    rows: Any
    row_count: int
    last_insert_id: Any
    column_names: "list[str]"
    is_select_result: bool


@trait
class CommonDriverAttributesMixin:
    """Connection handling and literal quoting for driver adapters."""

    __slots__ = ()
    connection: Any
    dialect: str = "mysql"

    def quote(self, value: str) -> str:
        """Quote a string literal for the driver's dialect.

        Args:
            value: Raw string value.

        Returns:
            The quoted and escaped literal, e.g. ``'it''s'``.
        """
        return exp.Literal.string(value).sql(dialect=self.dialect)

    @staticmethod
    def column_names_of(cursor: Any) -> "list[str]":
        return [column[0] for column in cursor.description or []]

    @staticmethod
    def create_execution_result(
        rows: Any = None,
        *,
        row_count: int = 0,
        last_insert_id: Optional[Any] = None,
        column_names: "Optional[list[str]]" = None,
        is_select_result: bool = False,
    ) -> ExecutionResult:
        return ExecutionResult(
            rows=rows,
            row_count=row_count,
            last_insert_id=last_insert_id,
            column_names=column_names or [],
            is_select_result=is_select_result,
        )
