from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, Union, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("SelectColumnsMixin",)


class SelectColumnsMixin:
    """Mixin providing the SELECT column list and aggregate helpers."""

    def _append_select(self, columns: str) -> None:
        state = cast("BuilderProtocol", self)._state
        state.select_list = columns if state.select_list == "*" else f"{state.select_list}, {columns}"

    def select(self, fields: Union[str, Sequence[str]]) -> Self:
        """Add columns to the SELECT list.

        The first call replaces the default ``*``; later calls append.

        Returns:
            The current builder instance for method chaining.
        """
        self._append_select(fields if isinstance(fields, str) else ", ".join(fields))
        return self

    def _aggregate(self, function: str, field: str, alias: Optional[str]) -> Self:
        column = f"{function}({field})"
        if alias is not None:
            column += f" AS {alias}"
        self._append_select(column)
        return self

    def count_(self, field: str = "*", alias: Optional[str] = None) -> Self:
        """Add ``COUNT(field)`` to the SELECT list, optionally aliased."""
        return self._aggregate("COUNT", field, alias)

    def sum_(self, field: str, alias: Optional[str] = None) -> Self:
        """Add ``SUM(field)`` to the SELECT list, optionally aliased."""
        return self._aggregate("SUM", field, alias)

    def avg_(self, field: str, alias: Optional[str] = None) -> Self:
        """Add ``AVG(field)`` to the SELECT list, optionally aliased."""
        return self._aggregate("AVG", field, alias)

    def max_(self, field: str, alias: Optional[str] = None) -> Self:
        """Add ``MAX(field)`` to the SELECT list, optionally aliased."""
        return self._aggregate("MAX", field, alias)

    def min_(self, field: str, alias: Optional[str] = None) -> Self:
        """Add ``MIN(field)`` to the SELECT list, optionally aliased."""
        return self._aggregate("MIN", field, alias)
