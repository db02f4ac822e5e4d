from typing import Any, Optional

__all__ = (
    "CacheDecodeError",
    "ConnectionError",
    "ExecutionError",
    "ImproperConfigurationError",
    "SQLBuilderError",
    "SQLChainError",
    "SerializationError",
)


class SQLChainError(Exception):
    """Base exception class from which all sqlchain exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLChainError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLChainError):
    """Improper Configuration error.

    Raised when a configuration value cannot be honoured, for example when the
    cache directory cannot be created.
    """


class ConnectionError(SQLChainError):  # noqa: A001
    """The database connection could not be established."""


class SQLBuilderError(SQLChainError):
    """Issues building or generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ExecutionError(SQLChainError):
    """The database rejected or failed a dispatched statement."""

    sql: Optional[str]
    driver_message: str

    def __init__(self, driver_message: str, sql: Optional[str] = None) -> None:
        """Initialize with the driver diagnostic and the failing statement."""
        detail_message = driver_message
        if sql:
            detail_message = f"{driver_message}. ({sql})"
        super().__init__(detail=detail_message)
        self.sql = sql
        self.driver_message = driver_message


class SerializationError(SQLChainError):
    """Encoding or decoding of an object failed."""


class CacheDecodeError(SerializationError):
    """A cache file could not be decoded."""
