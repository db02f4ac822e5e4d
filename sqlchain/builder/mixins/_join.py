import re
from typing import TYPE_CHECKING, Any, Final, Optional, cast

from typing_extensions import Self

from sqlchain.builder._parsing_utils import resolve_operator
from sqlchain.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("JoinClauseMixin",)

JOIN_TYPES: Final = frozenset({"", "INNER", "LEFT", "RIGHT", "FULL OUTER", "LEFT OUTER", "RIGHT OUTER"})
_ALIAS_PATTERN: Final = re.compile(r"^\s*(?P<table>\S+)\s+as\s+(?P<alias>\S+)\s*$", re.IGNORECASE)


class JoinClauseMixin:
    """Mixin providing JOIN clause construction."""

    def _join_target(self, table: str) -> str:
        builder = cast("BuilderProtocol", self)
        aliased = _ALIAS_PATTERN.match(table)
        if aliased is None:
            return builder.qualify_table(table)
        return f"{builder.qualify_table(aliased.group('table'))} AS {aliased.group('alias')}"

    def join(
        self,
        table: str,
        field1: Optional[str] = None,
        operator: Optional[Any] = None,
        field2: Optional[str] = None,
        join_type: str = "",
    ) -> Self:
        """Add a JOIN clause.

        ``field1`` alone is used as a pre-formed ON condition. With a second
        argument that is not a comparison token, the pair is joined with ``=``:
        ``join("b", "a.id", "b.aid")`` renders ``ON a.id = b.aid``.

        Args:
            table: Table to join, optionally aliased as ``"name as alias"``.
            field1: Left-hand column, or the complete ON condition.
            operator: Comparison token or the right-hand column.
            field2: Right-hand column when ``operator`` is a comparison token.
            join_type: One of ``INNER``, ``LEFT``, ``RIGHT``, ``FULL OUTER``,
                ``LEFT OUTER``, ``RIGHT OUTER`` or empty for a plain JOIN.

        Raises:
            SQLBuilderError: If the join type is not supported.

        Returns:
            The current builder instance for method chaining.
        """
        kind = " ".join(join_type.upper().split())
        if kind not in JOIN_TYPES:
            msg = f"Unsupported join type: {join_type}"
            raise SQLBuilderError(msg)
        clause = f"{kind} JOIN {self._join_target(table)}" if kind else f"JOIN {self._join_target(table)}"
        on = field1
        if field1 is not None and operator is not None:
            resolved = resolve_operator("join", field1, operator, field2)
            if resolved.reinterpreted:
                on = f"{field1} = {operator}" + (f" {field2}" if field2 is not None else "")
            else:
                on = f"{field1} {resolved.operator} {resolved.value}"
        if on:
            clause += f" ON {on}"
        cast("BuilderProtocol", self)._state.join_clauses.append(clause)
        return self

    def inner_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="INNER")

    def left_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="LEFT")

    def right_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="RIGHT")

    def full_outer_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="FULL OUTER")

    def left_outer_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="LEFT OUTER")

    def right_outer_join(
        self, table: str, field1: Optional[str] = None, operator: Optional[Any] = None, field2: Optional[str] = None
    ) -> Self:
        return self.join(table, field1, operator, field2, join_type="RIGHT OUTER")
