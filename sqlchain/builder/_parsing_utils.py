"""Shared helpers for turning accumulator arguments into SQL fragments."""

import re
from typing import Any, Final, NamedTuple

from sqlchain.typing import COMPARISON_OPERATORS
from sqlchain.utils.logging import get_logger

__all__ = ("ResolvedComparison", "is_comparison_operator", "resolve_operator")

logger = get_logger("builder")

_OPERATOR_LIKE: Final = re.compile(r"^\s*(?:[=<>!]+|(?i:r?like|not\s+like|in|not\s+in|is|is\s+not))\s*$")


class ResolvedComparison(NamedTuple):
    """Operator and value of a comparison call.

    ``reinterpreted`` is set when the operator argument was taken as the value
    of an implied ``=``.
    """

    operator: str
    value: Any
    reinterpreted: bool


def is_comparison_operator(token: Any) -> bool:
    """Check a token against the fixed comparison operator list (case-sensitive)."""
    return isinstance(token, str) and token in COMPARISON_OPERATORS


def resolve_operator(clause: str, field: str, operator: Any, value: Any) -> ResolvedComparison:
    """Resolve the (operator, value) pair of a comparison call.

    An operator that is not a recognized comparison token is reinterpreted as
    the value, with an implied ``=``. Tokens that look like an operator but are
    not recognized (``"=="``, ``"like"``) are logged as warnings.

    Returns:
        The operator to render, the value to render and whether the
        operator argument was reinterpreted.
    """
    if is_comparison_operator(operator):
        return ResolvedComparison(operator, value, reinterpreted=False)
    if isinstance(operator, str) and _OPERATOR_LIKE.match(operator):
        logger.warning(
            "%s on %r: %r is not a supported comparison operator; it is compared as a value with '='",
            clause,
            field,
            operator,
        )
    else:
        logger.debug("%s on %r: treating %r as the value of an implied '=' comparison", clause, field, operator)
    return ResolvedComparison("=", operator, reinterpreted=True)
