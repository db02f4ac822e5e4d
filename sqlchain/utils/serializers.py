"""Type-preserving JSON codec for cached result rows.

Plain JSON has no bytes, datetime, Decimal or UUID values, and msgspec would
turn them into strings. Values of those types are written as tagged objects,
``{"__sqlchain_type__": <kind>, "value": <text>}``, and rebuilt on decode so a
decoded payload compares equal to the one that was encoded.
"""

import base64
import binascii
import datetime
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable, Final, Union
from uuid import UUID

from sqlchain._serialization import decode_json, encode_json
from sqlchain.exceptions import SerializationError

__all__ = ("TYPE_TAG", "VALUE_KEY", "decode_tagged", "encode_tagged")

TYPE_TAG: Final = "__sqlchain_type__"
VALUE_KEY: Final = "value"


def _tagged(kind: str, value: Any) -> "dict[str, Any]":
    return {TYPE_TAG: kind, VALUE_KEY: value}


def _to_tagged(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else _tagged("float", repr(value))
    if isinstance(value, Mapping):
        plain = {key: _to_tagged(item) for key, item in value.items()}
        # a row with a column named like the tag must not be mistaken for a tagged value
        return _tagged("dict", plain) if TYPE_TAG in plain else plain
    if isinstance(value, (list, tuple)):
        return [_to_tagged(item) for item in value]
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _tagged("bytes", base64.b64encode(bytes(value)).decode("ascii"))
    if isinstance(value, datetime.datetime):
        return _tagged("datetime", value.isoformat())
    if isinstance(value, datetime.date):
        return _tagged("date", value.isoformat())
    if isinstance(value, datetime.time):
        return _tagged("time", value.isoformat())
    if isinstance(value, datetime.timedelta):
        return _tagged("timedelta", [value.days, value.seconds, value.microseconds])
    if isinstance(value, Decimal):
        return _tagged("decimal", str(value))
    if isinstance(value, UUID):
        return _tagged("uuid", str(value))
    return value


def _decode_bytes(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def _decode_timedelta(value: "list[int]") -> datetime.timedelta:
    days, seconds, microseconds = value
    return datetime.timedelta(days=days, seconds=seconds, microseconds=microseconds)


_DECODERS: "dict[str, Callable[[Any], Any]]" = {
    "bytes": _decode_bytes,
    "date": datetime.date.fromisoformat,
    "datetime": datetime.datetime.fromisoformat,
    "decimal": Decimal,
    "float": float,
    "time": datetime.time.fromisoformat,
    "timedelta": _decode_timedelta,
    "uuid": UUID,
}


def _from_tagged(value: Any) -> Any:
    if isinstance(value, list):
        return [_from_tagged(item) for item in value]
    if not isinstance(value, dict):
        return value
    kind = value.get(TYPE_TAG)
    if kind is None:
        return {key: _from_tagged(item) for key, item in value.items()}
    if kind == "dict":
        return {key: _from_tagged(item) for key, item in value[VALUE_KEY].items()}
    return _DECODERS[kind](value[VALUE_KEY])


def encode_tagged(data: Any) -> bytes:
    """Encode ``data`` to JSON bytes, tagging values JSON cannot represent.

    Raises:
        SerializationError: If ``data`` holds a value with no JSON form.
    """
    return encode_json(_to_tagged(data), as_bytes=True)


def decode_tagged(data: Union[str, bytes]) -> Any:
    """Decode JSON written by :func:`encode_tagged`, rebuilding tagged values.

    Raises:
        SerializationError: If the payload is not JSON or a tagged value is malformed.
    """
    decoded = decode_json(data)
    try:
        return _from_tagged(decoded)
    except (KeyError, TypeError, ValueError, ArithmeticError, AttributeError, binascii.Error) as exc:
        msg = f"Malformed tagged value: {exc}"
        raise SerializationError(msg) from exc
