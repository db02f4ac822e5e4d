"""sqlchain: a chainable SQL query builder with a TTL result cache."""

from sqlchain import adapters, builder, core, driver, exceptions, typing, utils
from sqlchain.__metadata__ import __version__
from sqlchain.base import SQLChain
from sqlchain.builder import BuilderState, QueryBuilder
from sqlchain.config import BuilderConfig
from sqlchain.core import FetchShape, FileCache
from sqlchain.driver import ExecutionResult, SyncDriverAdapterBase
from sqlchain.exceptions import (
    CacheDecodeError,
    ConnectionError,
    ExecutionError,
    ImproperConfigurationError,
    SerializationError,
    SQLBuilderError,
    SQLChainError,
)
from sqlchain.typing import Empty, EmptyType

__all__ = (
    "BuilderConfig",
    "BuilderState",
    "CacheDecodeError",
    "ConnectionError",
    "Empty",
    "EmptyType",
    "ExecutionError",
    "ExecutionResult",
    "FetchShape",
    "FileCache",
    "ImproperConfigurationError",
    "QueryBuilder",
    "SQLBuilderError",
    "SQLChain",
    "SQLChainError",
    "SerializationError",
    "SyncDriverAdapterBase",
    "__version__",
    "adapters",
    "builder",
    "core",
    "driver",
    "exceptions",
    "typing",
    "utils",
)
