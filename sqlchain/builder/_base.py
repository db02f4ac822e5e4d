"""Query builder composed from the clause mixins."""

from typing import TYPE_CHECKING, Any

from sqlchain.builder._state import BuilderState
from sqlchain.builder.mixins import (
    FromClauseMixin,
    GroupByClauseMixin,
    HavingClauseMixin,
    JoinClauseMixin,
    LimitOffsetClauseMixin,
    OrderByClauseMixin,
    SelectColumnsMixin,
    WhereClauseMixin,
)
from sqlchain.core.assembler import SqlAssembler

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ("QueryBuilder",)


class QueryBuilder(
    FromClauseMixin,
    SelectColumnsMixin,
    JoinClauseMixin,
    WhereClauseMixin,
    HavingClauseMixin,
    GroupByClauseMixin,
    OrderByClauseMixin,
    LimitOffsetClauseMixin,
):
    """Accumulates clauses into a :class:`BuilderState`.

    Every accumulator mutates the shared state and returns the same builder,
    so calls chain. Terminal operations live on :class:`~sqlchain.base.SQLChain`.

    Args:
        escape: Literal escaper bound to the driver's quoting capability.
        table_prefix: Prepended to every table name.
    """

    def __init__(self, escape: "Callable[[Any], str]", table_prefix: str = "") -> None:
        self._state = BuilderState(table_prefix=table_prefix)
        self._escape = escape
        self._assembler = SqlAssembler(escape)

    @property
    def state(self) -> BuilderState:
        return self._state

    def escape(self, value: Any) -> str:
        """Render a value as an engine-safe SQL literal."""
        return self._escape(value)

    def build_select(self) -> str:
        """Render the accumulated SELECT without resetting the builder."""
        return self._assembler.select(self._state)
