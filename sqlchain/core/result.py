"""Row shaping for fetched results.

The driver hands back column names and positional rows; these helpers turn
them into the representation the caller asked for.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any, Optional

import msgspec

from sqlchain.exceptions import SQLChainError
from sqlchain.utils.type_guards import is_dataclass, is_msgspec_struct

__all__ = ("FetchShape", "count_payload_rows", "restore_payload_shape", "shape_row", "shape_rows")


class FetchShape(str, Enum):
    """Row representation requested by the caller."""

    MAPPING = "mapping"
    TUPLE = "tuple"
    RECORD = "record"

    @property
    def cacheable(self) -> bool:
        return self is not FetchShape.RECORD


def _to_record(row: "dict[str, Any]", record_type: "type[Any]") -> Any:
    if is_msgspec_struct(record_type) or is_dataclass(record_type):
        return msgspec.convert(row, type=record_type, strict=False)
    return record_type(**row)


def shape_row(
    row: "Sequence[Any]",
    column_names: "Sequence[str]",
    shape: FetchShape = FetchShape.MAPPING,
    record_type: "Optional[type[Any]]" = None,
) -> Any:
    """Shape one positional row.

    Raises:
        SQLChainError: If a record shape is requested without a record type.

    Returns:
        A dict, a tuple or an instance of ``record_type``.
    """
    if shape is FetchShape.TUPLE:
        return tuple(row)
    mapping = dict(zip(column_names, row))
    if shape is FetchShape.RECORD:
        if record_type is None:
            msg = "FetchShape.RECORD requires a record_type."
            raise SQLChainError(msg)
        return _to_record(mapping, record_type)
    return mapping


def shape_rows(
    rows: "Sequence[Sequence[Any]]",
    column_names: "Sequence[str]",
    shape: FetchShape = FetchShape.MAPPING,
    record_type: "Optional[type[Any]]" = None,
) -> "list[Any]":
    return [shape_row(row, column_names, shape, record_type) for row in rows]


def restore_payload_shape(payload: Any, shape: FetchShape, all_rows: bool = True) -> Any:
    """Undo the tuple-to-list loss of a JSON round trip.

    A single-row payload is a flat list; a multi-row payload is a list of lists.
    """
    if shape is not FetchShape.TUPLE or not isinstance(payload, list):
        return payload
    if all_rows:
        return [tuple(row) if isinstance(row, list) else row for row in payload]
    return tuple(payload)


def count_payload_rows(payload: Any, all_rows: bool) -> int:
    """Logical row count of a cached payload."""
    if payload is None:
        return 0
    if all_rows and isinstance(payload, list):
        return len(payload)
    return 1
