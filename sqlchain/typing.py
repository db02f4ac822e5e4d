from collections.abc import Sequence
from enum import Enum
from typing import Any, Final, Literal, Optional

from typing_extensions import TypeAlias

__all__ = ("COMPARISON_OPERATORS", "DictRow", "Empty", "EmptyEnum", "EmptyType", "StatementParameters")


class EmptyEnum(Enum):
    """A sentinel enum used as placeholder."""

    EMPTY = 0


EmptyType: TypeAlias = Literal[EmptyEnum.EMPTY]
Empty: Final = EmptyEnum.EMPTY
"""Marks a missing argument or a cache miss, distinct from ``None``."""

DictRow: TypeAlias = "dict[str, Any]"
StatementParameters: TypeAlias = "Optional[Sequence[Any]]"

COMPARISON_OPERATORS: Final = ("=", "!=", "<", ">", "<=", ">=", "<>", "RLIKE")
