"""Unit tests for the TTL file cache."""

import datetime
import hashlib
import os
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch
from uuid import UUID

import pytest

from sqlchain.core import FetchShape, FileCache
from sqlchain.core.cache import CACHE_FILE_SUFFIX, STALE_AFTER_SECONDS
from sqlchain.exceptions import ImproperConfigurationError
from sqlchain.typing import Empty


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(tmp_path: Path, clock: FakeClock) -> FileCache:
    return FileCache(tmp_path / "cache", ttl=60, clock=clock)


def test_key_is_md5_of_statement_text(cache: FileCache) -> None:
    assert cache.key_for("SELECT 1") == hashlib.md5(b"SELECT 1").hexdigest()
    assert cache.key_for("SELECT 1") != cache.key_for("SELECT  1")
    assert cache.path_for("SELECT 1").name == cache.key_for("SELECT 1") + CACHE_FILE_SUFFIX


def test_constructor_creates_directory(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    FileCache(target)

    assert target.is_dir()


def test_constructor_rejects_unusable_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(ImproperConfigurationError):
        FileCache(blocker / "cache")


def test_set_then_get_returns_payload(cache: FileCache) -> None:
    payload = [{"id": 1, "name": "Ann"}, {"id": 2, "name": None}]

    assert cache.set("SELECT * FROM `users`", payload) is True
    assert cache.get("SELECT * FROM `users`") == payload


def test_cached_empty_results_are_hits(cache: FileCache) -> None:
    cache.set("SELECT * FROM `a`", [])
    cache.set("SELECT * FROM `b` LIMIT 1", None)

    assert cache.get("SELECT * FROM `a`") == []
    assert cache.get("SELECT * FROM `b` LIMIT 1", all_rows=False) is None


def test_missing_entry_is_a_miss(cache: FileCache) -> None:
    assert cache.get("SELECT 2") is Empty


def test_expired_entry_is_a_miss_and_deleted(cache: FileCache, clock: FakeClock) -> None:
    cache.set("SELECT 1", [{"a": 1}])
    path = cache.path_for("SELECT 1")

    clock.now += 61

    assert cache.get("SELECT 1") is Empty
    assert not path.exists()


def test_entry_is_valid_until_expiry(cache: FileCache, clock: FakeClock) -> None:
    cache.set("SELECT 1", [{"a": 1}])

    clock.now += 60

    assert cache.get("SELECT 1") == [{"a": 1}]


def test_set_overwrites_existing_entry(cache: FileCache) -> None:
    cache.set("SELECT 1", [1])
    cache.set("SELECT 1", [2])

    assert cache.get("SELECT 1") == [2]


def test_undecodable_entry_is_a_miss(cache: FileCache) -> None:
    cache.path_for("SELECT 1").write_text('{"data": [1], "exp')

    assert cache.get("SELECT 1") is Empty


def test_entry_without_expiry_is_a_miss(cache: FileCache) -> None:
    cache.path_for("SELECT 1").write_text('{"data": [1]}')

    assert cache.get("SELECT 1") is Empty


def test_tuple_rows_are_restored(cache: FileCache) -> None:
    cache.set("SELECT a, b FROM t", [(1, "x"), (2, "y")])
    cache.set("SELECT a, b FROM t LIMIT 1", (1, "x"))

    assert cache.get("SELECT a, b FROM t", FetchShape.TUPLE) == [(1, "x"), (2, "y")]
    assert cache.get("SELECT a, b FROM t LIMIT 1", FetchShape.TUPLE, all_rows=False) == (1, "x")


def test_write_failure_is_swallowed(cache: FileCache) -> None:
    with patch.object(Path, "write_bytes", side_effect=OSError("disk full")):
        assert cache.set("SELECT 1", [1]) is False


def test_unencodable_payload_is_swallowed(cache: FileCache) -> None:
    assert cache.set("SELECT 1", [object()]) is False
    assert cache.get("SELECT 1") is Empty


def test_sweep_removes_stale_files_only(tmp_path: Path, clock: FakeClock) -> None:
    directory = tmp_path / "cache"
    directory.mkdir()
    stale = directory / f"stale{CACHE_FILE_SUFFIX}"
    fresh = directory / f"fresh{CACHE_FILE_SUFFIX}"
    stale.write_text("{}")
    fresh.write_text("{}")
    os.utime(stale, (clock.now - STALE_AFTER_SECONDS - 10,) * 2)
    os.utime(fresh, (clock.now - 10,) * 2)

    FileCache(directory, clock=clock)

    assert not stale.exists()
    assert fresh.exists()


def test_sweep_ignores_own_expiry(cache: FileCache, clock: FakeClock) -> None:
    cache.set("SELECT 1", [1])
    path = cache.path_for("SELECT 1")
    os.utime(path, (clock.now - STALE_AFTER_SECONDS - 1,) * 2)

    assert cache.sweep() == 1
    assert not path.exists()


def test_sweep_leaves_foreign_files_alone(tmp_path: Path, clock: FakeClock) -> None:
    directory = tmp_path / "shared"
    directory.mkdir()
    foreign = directory / "notes.txt"
    foreign.write_text("keep me")
    os.utime(foreign, (clock.now - STALE_AFTER_SECONDS - 10,) * 2)

    assert FileCache(directory, clock=clock).sweep() == 0
    assert foreign.exists()


def test_typed_rows_read_back_unchanged(cache: FileCache) -> None:
    rows = [
        {
            "id": 1,
            "body": b"\x00\xff\x10",
            "created_at": datetime.datetime(2024, 1, 2, 3, 4, 5, 123456),
            "day": datetime.date(2024, 1, 2),
            "price": Decimal("9.990"),
            "uid": UUID("12345678-1234-5678-1234-567812345678"),
            "ratio": float("inf"),
        }
    ]

    cache.set("SELECT * FROM `files`", rows)
    hit = cache.get("SELECT * FROM `files`")

    assert hit == rows
    assert isinstance(hit[0]["body"], bytes)
    assert str(hit[0]["price"]) == "9.990"


def test_tuple_rows_keep_typed_cells(cache: FileCache) -> None:
    cache.set("SELECT body FROM t LIMIT 1", (b"\x01", datetime.time(12, 30)))

    assert cache.get("SELECT body FROM t LIMIT 1", FetchShape.TUPLE, all_rows=False) == (
        b"\x01",
        datetime.time(12, 30),
    )


def test_malformed_tagged_value_is_a_miss(cache: FileCache) -> None:
    cache.path_for("SELECT 1").write_text(
        '{"data": [{"__sqlchain_type__": "decimal", "value": "not a number"}], "expiry": 9999999999}'
    )

    assert cache.get("SELECT 1") is Empty
