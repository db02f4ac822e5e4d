"""Clause accumulators and builder state."""

from sqlchain.builder._base import QueryBuilder
from sqlchain.builder._state import BuilderState, ConditionExpression, ConditionNode

__all__ = ("BuilderState", "ConditionExpression", "ConditionNode", "QueryBuilder")
