"""Disk-backed TTL cache for query results.

One file per statement, named after the MD5 digest of the exact statement
text. Each file stores ``{"data": <payload>, "expiry": <unix seconds>}`` encoded
with :func:`~sqlchain.utils.serializers.encode_tagged`, so bytes, temporal,
Decimal and UUID values read back unchanged.

The cache is best-effort: undecodable or half-written files read as misses,
write failures are logged and swallowed, and concurrent writers to the same
key race with last-write-wins semantics.
"""

import contextlib
import hashlib
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Union

from mypy_extensions import mypyc_attr

from sqlchain.core.result import FetchShape, restore_payload_shape
from sqlchain.exceptions import CacheDecodeError, ImproperConfigurationError, SerializationError
from sqlchain.typing import Empty
from sqlchain.utils.logging import get_logger, statement_fields
from sqlchain.utils.serializers import decode_tagged, encode_tagged

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlchain.typing import EmptyType

__all__ = ("CACHE_FILE_SUFFIX", "STALE_AFTER_SECONDS", "FileCache")

logger = get_logger("core.cache")

CACHE_FILE_SUFFIX: Final = ".cache"
STALE_AFTER_SECONDS: Final = 43200


@mypyc_attr(allow_interpreted_subclasses=False)
class FileCache:
    """TTL file cache keyed by statement text.

    Args:
        directory: Directory holding the cache files. Created when missing.
        ttl: Lifetime of written entries, in seconds.
        stale_after: Files untouched for longer than this are removed by
            :meth:`sweep` regardless of their own expiry.
        clock: Source of the current unix time.
    """

    __slots__ = ("_clock", "_directory", "_stale_after", "_ttl")

    def __init__(
        self,
        directory: Union[str, Path],
        ttl: int = 0,
        stale_after: int = STALE_AFTER_SECONDS,
        clock: "Callable[[], float]" = time.time,
    ) -> None:
        path = Path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f'Cache directory "{path}" was not created'
            raise ImproperConfigurationError(msg) from exc
        if not path.is_dir():
            msg = f'Cache directory "{path}" is not a directory'
            raise ImproperConfigurationError(msg)

        self._directory = path
        self._ttl = ttl
        self._stale_after = stale_after
        self._clock = clock
        self.sweep()

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def ttl(self) -> int:
        return self._ttl

    @staticmethod
    def key_for(sql: str) -> str:
        """Content hash of the exact statement text."""
        return hashlib.md5(sql.encode("utf-8"), usedforsecurity=False).hexdigest()

    def path_for(self, sql: str) -> Path:
        return self._directory / f"{self.key_for(sql)}{CACHE_FILE_SUFFIX}"

    @staticmethod
    def _decode_entry(raw: bytes) -> "tuple[Any, float]":
        try:
            entry = decode_tagged(raw)
            return entry["data"], float(entry["expiry"])
        except (SerializationError, KeyError, TypeError, ValueError) as exc:
            msg = f"Malformed cache entry: {exc}"
            raise CacheDecodeError(msg) from exc

    def get(self, sql: str, shape: FetchShape = FetchShape.MAPPING, all_rows: bool = True) -> "Union[Any, EmptyType]":
        """Look up the payload stored for a statement.

        Args:
            sql: Exact statement text.
            shape: Row shape the caller expects, used to restore tuple rows.
            all_rows: Whether the payload holds a list of rows or a single row.

        Returns:
            The cached payload, or :data:`~sqlchain.typing.Empty` on a miss.
        """
        path = self.path_for(sql)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Cache miss for %s", path.name, extra=statement_fields(sql))
            return Empty
        except OSError as exc:
            logger.debug("Cache read failed for %s: %s", path.name, exc)
            return Empty

        try:
            payload, expiry = self._decode_entry(raw)
        except CacheDecodeError as exc:
            logger.debug("Undecodable cache entry %s treated as miss: %s", path.name, exc)
            return Empty

        if expiry < self._clock():
            logger.debug("Cache entry %s expired", path.name)
            with contextlib.suppress(OSError):
                path.unlink()
            return Empty

        logger.debug("Cache hit for %s", path.name, extra=statement_fields(sql))
        return restore_payload_shape(payload, shape, all_rows)

    def set(self, sql: str, payload: Any) -> bool:
        """Store a payload for a statement, replacing any existing entry.

        Returns:
            True when the entry was written.
        """
        path = self.path_for(sql)
        try:
            encoded = encode_tagged({"data": payload, "expiry": self._clock() + self._ttl})
            path.write_bytes(encoded)
        except (OSError, SerializationError) as exc:
            logger.warning("Cache write failed for %s: %s", path.name, exc)
            return False
        return True

    def sweep(self) -> int:
        """Remove cache files untouched for longer than the staleness horizon.

        Only files carrying the cache suffix are considered.

        Returns:
            Number of files removed.
        """
        now = self._clock()
        removed = 0
        for entry in self._directory.glob(f"*{CACHE_FILE_SUFFIX}"):
            try:
                if not entry.is_file() or now - entry.stat().st_mtime <= self._stale_after:
                    continue
                entry.unlink()
            except OSError:
                continue
            removed += 1
        if removed:
            logger.debug("Swept %d stale cache files from %s", removed, self._directory)
        return removed
