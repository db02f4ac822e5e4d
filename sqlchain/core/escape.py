"""Literal escaping.

Values are turned into engine-safe SQL literals. Numbers render unquoted,
``None`` renders as ``NULL`` and text goes through the driver's quoting
capability. Identifiers never pass through here.
"""

import datetime
import math
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlchain.exceptions import SQLBuilderError
from sqlchain.utils.type_guards import is_fractional, is_number

__all__ = ("Escaper", "escape_literal")


def escape_literal(value: Any, quote: "Callable[[str], str]") -> str:
    """Render a value as a SQL literal.

    Args:
        value: The value to render.
        quote: Driver callable returning a quoted string literal.

    Raises:
        SQLBuilderError: If a float or Decimal is not finite.

    Returns:
        The SQL literal text.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if is_number(value):
        if not is_fractional(value):
            return str(int(value))
        if not (value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)):
            msg = f"Cannot render non-finite number {value!r} as a SQL literal."
            raise SQLBuilderError(msg)
        return str(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, Enum):
        return escape_literal(value.value, quote)
    if isinstance(value, datetime.datetime):
        return quote(value.isoformat(sep=" "))
    if isinstance(value, (datetime.date, datetime.time)):
        return quote(value.isoformat())
    if isinstance(value, (bytes, bytearray, memoryview)):
        return quote(bytes(value).decode("utf-8", errors="replace"))
    return quote(str(value))


class Escaper:
    """Callable escaper bound to a driver's quoting capability."""

    __slots__ = ("_quote",)

    def __init__(self, quote: "Callable[[str], str]") -> None:
        self._quote = quote

    def __call__(self, value: Any) -> str:
        return escape_literal(value, self._quote)

    def quote(self, value: str) -> str:
        return self._quote(value)
