from collections.abc import Sequence
from typing import TYPE_CHECKING, Union, cast

from typing_extensions import Self

from sqlchain.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("FromClauseMixin",)


class FromClauseMixin:
    """Mixin providing table selection with automatic prefixing."""

    def qualify_table(self, name: str) -> str:
        """Prefix and backtick-quote a table name.

        Identifiers are inserted verbatim; they are never escaped as literals.
        """
        builder = cast("BuilderProtocol", self)
        return f"`{builder._state.table_prefix}{name.strip()}`"

    def table(self, table: Union[str, Sequence[str]]) -> Self:
        """Set the target table(s).

        Args:
            table: A table name, a list of names, or a comma-joined string of names.

        Raises:
            SQLBuilderError: If no table name is given.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        names = table.split(",") if isinstance(table, str) else list(table)
        names = [name for name in names if name.strip()]
        if not names:
            msg = "table() requires at least one table name."
            raise SQLBuilderError(msg)
        builder._state.from_clause = ", ".join(self.qualify_table(name) for name in names)
        return self
