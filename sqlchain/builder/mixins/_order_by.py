from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, Union, cast

from typing_extensions import Self

if TYPE_CHECKING:
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("GroupByClauseMixin", "OrderByClauseMixin")


class OrderByClauseMixin:
    """Mixin providing ORDER BY clause construction."""

    def order_by(self, field: str, direction: Optional[str] = None) -> Self:
        """Add an ORDER BY item.

        Without a direction, ``ASC`` is appended unless ``field`` already
        carries one (contains a space) or is ``rand()``. Repeated calls append.

        Returns:
            The current builder instance for method chaining.
        """
        state = cast("BuilderProtocol", self)._state
        if direction is not None:
            item = f"{field} {direction.upper()}"
        elif " " in field or field.lower() == "rand()":
            item = field
        else:
            item = f"{field} ASC"
        state.order_by = item if state.order_by is None else f"{state.order_by}, {item}"
        return self


class GroupByClauseMixin:
    """Mixin providing GROUP BY clause construction."""

    def group_by(self, fields: Union[str, Sequence[str]]) -> Self:
        """Set the GROUP BY list, replacing any previous one."""
        state = cast("BuilderProtocol", self)._state
        state.group_by = fields if isinstance(fields, str) else ", ".join(fields)
        return self
