"""Type guard functions for runtime type checking in sqlchain.

This module provides type-safe runtime checks that help the type checker
understand type narrowing, replacing ad hoc isinstance chains.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import msgspec

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "is_dataclass",
    "is_fractional",
    "is_mapping_sequence",
    "is_msgspec_struct",
    "is_number",
    "is_value_sequence",
)


def is_number(value: Any) -> "TypeGuard[int | float | Decimal]":
    """Check if a value is a real number.

    Booleans are numbers too, they render as ``1`` and ``0``.

    Args:
        value: The value to check

    Returns:
        True if the value is an int, float or Decimal
    """
    return isinstance(value, (int, float, Decimal))


def is_fractional(value: Any) -> "TypeGuard[float | Decimal]":
    """Check if a numeric value carries a fractional type.

    Args:
        value: The value to check

    Returns:
        True for floats and Decimals
    """
    return isinstance(value, (float, Decimal))


def is_value_sequence(value: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if a value is a list-like sequence of values (not text)."""
    return isinstance(value, (list, tuple))


def is_mapping_sequence(value: Any) -> "TypeGuard[Sequence[Mapping[str, Any]]]":
    """Check if a value is a non-empty sequence whose first member is a mapping."""
    return is_value_sequence(value) and len(value) > 0 and isinstance(value[0], Mapping)


def is_dataclass(obj: Any) -> bool:
    """Check if an object is a dataclass type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and hasattr(obj, "__dataclass_fields__")


def is_msgspec_struct(obj: Any) -> bool:
    """Check if a value is a msgspec struct type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and issubclass(obj, msgspec.Struct)
