"""Unit tests for JSON serialization."""

import datetime
from decimal import Decimal
from pathlib import PurePosixPath
from uuid import UUID

import pytest

from sqlchain._serialization import decode_json, encode_json
from sqlchain.exceptions import SerializationError
from sqlchain.utils.serializers import TYPE_TAG, decode_tagged, encode_tagged


def test_round_trip_of_rows() -> None:
    rows = [{"id": 1, "name": "Ann", "score": 1.5, "tags": None}]

    assert decode_json(encode_json(rows)) == rows
    assert decode_json(encode_json(rows, as_bytes=True)) == rows


def test_plain_codec_writes_strings_for_temporal_values() -> None:
    encoded = encode_json({"at": datetime.datetime(2024, 1, 2, 3, 4, 5), "price": Decimal("9.99")})

    assert decode_json(encoded) == {"at": "2024-01-02T03:04:05", "price": "9.99"}


def test_unsupported_values_raise() -> None:
    with pytest.raises(SerializationError):
        encode_json({"x": object()})
    with pytest.raises(SerializationError):
        encode_tagged({"x": object()})


def test_invalid_json_raises() -> None:
    with pytest.raises(SerializationError):
        decode_json("{not json")
    with pytest.raises(SerializationError):
        decode_tagged("{not json")


def test_paths_encode_as_strings() -> None:
    assert decode_json(encode_json({"dir": PurePosixPath("/tmp/cache")})) == {"dir": "/tmp/cache"}


@pytest.mark.parametrize(
    "value",
    [
        b"\x00\xff\x10",
        bytearray(b"abc"),
        datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc),
        datetime.date(2024, 1, 2),
        datetime.time(23, 59, 1),
        datetime.timedelta(days=1, seconds=5, microseconds=7),
        Decimal("-0.010"),
        UUID("12345678-1234-5678-1234-567812345678"),
        float("-inf"),
    ],
    ids=["bytes", "bytearray", "datetime", "date", "time", "timedelta", "decimal", "uuid", "infinity"],
)
def test_tagged_codec_preserves_type(value: object) -> None:
    decoded = decode_tagged(encode_tagged({"cell": value}))

    assert decoded == {"cell": value}
    assert type(decoded["cell"]) is (bytes if isinstance(value, bytearray) else type(value))


def test_tagged_codec_keeps_rows_using_the_tag_name() -> None:
    row = {TYPE_TAG: "bytes", "value": "not base64"}

    assert decode_tagged(encode_tagged([row])) == [row]


def test_unknown_tag_raises() -> None:
    with pytest.raises(SerializationError):
        decode_tagged('{"__sqlchain_type__": "mystery", "value": 1}')
