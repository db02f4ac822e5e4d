from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Union, cast

from typing_extensions import Self

from sqlchain.builder._parsing_utils import resolve_operator
from sqlchain.core.assembler import bind_placeholders
from sqlchain.exceptions import SQLBuilderError
from sqlchain.typing import Empty
from sqlchain.utils.type_guards import is_number, is_value_sequence

if TYPE_CHECKING:
    from sqlchain.builder._state import ConditionExpression
    from sqlchain.builder.protocols import BuilderProtocol

__all__ = ("HavingClauseMixin", "WhereClauseMixin")

BETWEEN_BOUNDS = 2


def _negation(negate: bool) -> str:
    return "NOT " if negate else ""


class WhereClauseMixin:
    """Mixin providing the WHERE accumulators.

    Every call appends ``<AND|OR> <fragment>`` to the running expression in
    call order. The ``not_`` variants negate the fragment, never the connector.
    """

    def _add_where(self, fragment: str, and_or: str = "AND") -> Self:
        cast("BuilderProtocol", self)._state.where.append(fragment, and_or)
        return self

    def where(
        self,
        condition: Union[str, Mapping[str, Any]],
        operator: Any = Empty,
        value: Any = Empty,
        *,
        negate: bool = False,
        and_or: str = "AND",
    ) -> Self:
        """Add a WHERE condition.

        Supported forms:

        - ``where({"a": 1, "b": 2})``: ``a=1 AND b=2``
        - ``where("a = 1")``: raw fragment
        - ``where("a = ? AND b = ?", [1, 2])``: positional binding
        - ``where("a", 1)``: implied equality, ``a=1``
        - ``where("a", ">", 1)``: explicit comparison, ``a > 1``

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        prefix = _negation(negate)
        if isinstance(condition, Mapping):
            if not condition:
                return self
            fragment = f" {and_or} ".join(
                f"{prefix}{column}={builder.escape(data)}" for column, data in condition.items()
            )
        elif not condition:
            return self
        elif is_value_sequence(operator):
            fragment = prefix + bind_placeholders(condition, operator, builder.escape)
        elif operator is Empty and value is Empty:
            fragment = prefix + condition
        else:
            resolved = resolve_operator("where", condition, operator, None if value is Empty else value)
            if resolved.reinterpreted:
                fragment = f"{prefix}{condition}={builder.escape(resolved.value)}"
            else:
                fragment = f"{prefix}{condition} {resolved.operator} {builder.escape(resolved.value)}"
        return self._add_where(fragment, and_or)

    def or_where(self, condition: Union[str, Mapping[str, Any]], operator: Any = Empty, value: Any = Empty) -> Self:
        return self.where(condition, operator, value, and_or="OR")

    def not_where(self, condition: Union[str, Mapping[str, Any]], operator: Any = Empty, value: Any = Empty) -> Self:
        return self.where(condition, operator, value, negate=True)

    def or_not_where(
        self, condition: Union[str, Mapping[str, Any]], operator: Any = Empty, value: Any = Empty
    ) -> Self:
        return self.where(condition, operator, value, negate=True, and_or="OR")

    def where_null(self, field: str, negate: bool = False) -> Self:
        """Add ``field IS [NOT] NULL``."""
        return self._add_where(f"{field} IS {_negation(negate)}NULL")

    def where_not_null(self, field: str) -> Self:
        return self.where_null(field, negate=True)

    def grouped(self, scope: "Callable[[Self], Any]") -> Self:
        """Wrap the conditions added by ``scope`` in one pair of parentheses.

        Args:
            scope: Callable receiving this builder. Scopes may nest.

        Returns:
            The current builder instance for method chaining.
        """
        expression: ConditionExpression = cast("BuilderProtocol", self)._state.where
        expression.open_group()
        scope(self)
        expression.close_group()
        return self

    def in_(
        self, field: str, keys: Union[Sequence[Any], Any], *, negate: bool = False, and_or: str = "AND"
    ) -> Self:
        """Add ``field [NOT] IN (...)`` preserving the order of ``keys``.

        Raises:
            SQLBuilderError: If ``keys`` is an empty sequence.
        """
        builder = cast("BuilderProtocol", self)
        if is_value_sequence(keys):
            if not keys:
                msg = f"in_() on {field!r} requires at least one value."
                raise SQLBuilderError(msg)
            members = ", ".join(builder.escape(key) for key in keys)
        else:
            members = builder.escape(keys)
        return self._add_where(f"{field} {_negation(negate)}IN ({members})", and_or)

    def not_in(self, field: str, keys: Union[Sequence[Any], Any]) -> Self:
        return self.in_(field, keys, negate=True)

    def or_in(self, field: str, keys: Union[Sequence[Any], Any]) -> Self:
        return self.in_(field, keys, and_or="OR")

    def or_not_in(self, field: str, keys: Union[Sequence[Any], Any]) -> Self:
        return self.in_(field, keys, negate=True, and_or="OR")

    def find_in_set(self, field: str, key: Any, *, negate: bool = False, and_or: str = "AND") -> Self:
        """Add ``[NOT ]FIND_IN_SET (key, field)``; numeric keys are truncated to integers."""
        builder = cast("BuilderProtocol", self)
        literal = str(int(key)) if is_number(key) else builder.escape(key)
        return self._add_where(f"{_negation(negate)}FIND_IN_SET ({literal}, {field})", and_or)

    def not_find_in_set(self, field: str, key: Any) -> Self:
        return self.find_in_set(field, key, negate=True)

    def or_find_in_set(self, field: str, key: Any) -> Self:
        return self.find_in_set(field, key, and_or="OR")

    def or_not_find_in_set(self, field: str, key: Any) -> Self:
        return self.find_in_set(field, key, negate=True, and_or="OR")

    def between(
        self, field: str, low: Any, high: Any = Empty, *, negate: bool = False, and_or: str = "AND"
    ) -> Self:
        """Add ``(field [NOT ]BETWEEN low AND high)``.

        ``low`` may also be a two-item sequence holding both bounds. A call
        without an upper bound adds nothing.
        """
        builder = cast("BuilderProtocol", self)
        if high is Empty:
            if not (is_value_sequence(low) and len(low) == BETWEEN_BOUNDS):
                return self
            low, high = low
        fragment = f"({field} {_negation(negate)}BETWEEN {builder.escape(low)} AND {builder.escape(high)})"
        return self._add_where(fragment, and_or)

    def not_between(self, field: str, low: Any, high: Any = Empty) -> Self:
        return self.between(field, low, high, negate=True)

    def or_between(self, field: str, low: Any, high: Any = Empty) -> Self:
        return self.between(field, low, high, and_or="OR")

    def or_not_between(self, field: str, low: Any, high: Any = Empty) -> Self:
        return self.between(field, low, high, negate=True, and_or="OR")

    def like(self, field: str, pattern: str, *, negate: bool = False, and_or: str = "AND") -> Self:
        """Add ``field [NOT ]LIKE pattern``."""
        builder = cast("BuilderProtocol", self)
        return self._add_where(f"{field} {_negation(negate)}LIKE {builder.escape(pattern)}", and_or)

    def or_like(self, field: str, pattern: str) -> Self:
        return self.like(field, pattern, and_or="OR")

    def not_like(self, field: str, pattern: str) -> Self:
        return self.like(field, pattern, negate=True)

    def or_not_like(self, field: str, pattern: str) -> Self:
        return self.like(field, pattern, negate=True, and_or="OR")

    def group_or_like(self, fields: Sequence[str], pattern: str, and_or: str = "AND") -> Self:
        """Match one pattern against several fields: ``(f1 LIKE p OR f2 LIKE p)``."""
        if not fields:
            return self
        literal = cast("BuilderProtocol", self).escape(pattern)
        return self._add_where("(" + " OR ".join(f"{field} LIKE {literal}" for field in fields) + ")", and_or)

    def match(self, fields: Union[str, Sequence[str]], terms: Union[str, Sequence[str]], and_or: str = "AND") -> Self:
        """Add a full-text ``MATCH ... AGAINST`` condition in boolean mode.

        Every whitespace separated word becomes a required prefix term, ``+word*``.
        """
        if not fields or not terms:
            return self
        columns = f"`{fields}`" if isinstance(fields, str) else ",".join(fields)
        words = terms.split() if isinstance(terms, str) else [word for term in terms for word in str(term).split()]
        if not words:
            return self
        expression = cast("BuilderProtocol", self).escape(" ".join(f"+{word}*" for word in words))
        return self._add_where(f"MATCH ({columns}) AGAINST({expression} IN BOOLEAN MODE)", and_or)


class HavingClauseMixin:
    """Mixin providing the HAVING accumulators."""

    def having(self, field: str, operator: Any = Empty, value: Any = Empty, *, and_or: str = "AND") -> Self:
        """Add a HAVING condition.

        Accepts the same forms as ``where`` apart from mappings.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        if not field:
            return self
        if is_value_sequence(operator):
            fragment = bind_placeholders(field, operator, builder.escape)
        elif operator is Empty and value is Empty:
            fragment = field
        else:
            resolved = resolve_operator("having", field, operator, None if value is Empty else value)
            if resolved.reinterpreted:
                fragment = f"{field}={builder.escape(resolved.value)}"
            else:
                fragment = f"{field} {resolved.operator} {builder.escape(resolved.value)}"
        builder._state.having.append(fragment, and_or)
        return self

    def or_having(self, field: str, operator: Any = Empty, value: Any = Empty) -> Self:
        return self.having(field, operator, value, and_or="OR")
