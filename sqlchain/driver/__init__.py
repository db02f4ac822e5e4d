"""Driver base classes for database adapters."""

from sqlchain.driver._common import CommonDriverAttributesMixin, ExecutionResult
from sqlchain.driver._sync import SyncDriverAdapterBase

__all__ = ("CommonDriverAttributesMixin", "ExecutionResult", "SyncDriverAdapterBase")
