import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from sqlchain.exceptions import ImproperConfigurationError

__all__ = ("DEFAULT_CACHE_DIR_NAME", "BuilderConfig", "default_cache_dir")

DEFAULT_CACHE_DIR_NAME = "sqlchain-cache"


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIR_NAME


@dataclass(frozen=True)
class BuilderConfig:
    """Settings consumed by :class:`~sqlchain.base.SQLChain`.

    Attributes:
        table_prefix: Prepended to every table name passed to ``table()`` and ``join()``.
        cache_dir: Directory for the result cache, created on first ``cache()`` call.
        debug: Terminate the process with a diagnostic on a failed statement
            instead of raising :class:`~sqlchain.exceptions.ExecutionError`.
    """

    table_prefix: str = ""
    cache_dir: Union[str, Path] = field(default_factory=default_cache_dir)
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.table_prefix, str):
            msg = f"table_prefix must be a string, got {type(self.table_prefix).__name__}"
            raise ImproperConfigurationError(msg)
        if not str(self.cache_dir):
            msg = "cache_dir must not be empty"
            raise ImproperConfigurationError(msg)
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))
