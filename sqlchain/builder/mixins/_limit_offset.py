from typing import TYPE_CHECKING, Optional, cast

from typing_extensions import Self

from sqlchain.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("LimitOffsetClauseMixin",)


class LimitOffsetClauseMixin:
    """Mixin providing LIMIT, OFFSET and page arithmetic."""

    def limit(self, count: int, end: Optional[int] = None) -> Self:
        """Set the LIMIT clause; with ``end`` it renders ``LIMIT count, end``."""
        state = cast("BuilderProtocol", self)._state
        state.limit = int(count)
        state.limit_end = None if end is None else int(end)
        return self

    def offset(self, offset: int) -> Self:
        cast("BuilderProtocol", self)._state.offset = int(offset)
        return self

    def pagination(self, per_page: int, page: int) -> Self:
        """Set LIMIT and OFFSET for one page of results.

        Pages are numbered from 1; a page of 0 or less is clamped to 1.

        Raises:
            SQLBuilderError: If ``per_page`` is negative.

        Returns:
            The current builder instance for method chaining.
        """
        if per_page < 0:
            msg = f"per_page must not be negative, got {per_page}"
            raise SQLBuilderError(msg)
        state = cast("BuilderProtocol", self)._state
        state.limit = int(per_page)
        state.limit_end = None
        state.offset = (max(int(page), 1) - 1) * int(per_page)
        return self
