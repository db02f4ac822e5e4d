"""SQLite adapter for sqlchain."""

from sqlchain.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlchain.adapters.sqlite.driver import SqliteConnection, SqliteCursor, SqliteDriver

__all__ = ("SqliteConfig", "SqliteConnection", "SqliteConnectionParams", "SqliteCursor", "SqliteDriver")
