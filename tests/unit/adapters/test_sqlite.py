"""Unit tests for the SQLite driver and configuration."""

import sqlite3
from unittest.mock import MagicMock, patch

import pytest

from sqlchain.adapters.sqlite import SqliteConfig, SqliteCursor, SqliteDriver
from sqlchain.core import FetchShape
from sqlchain.exceptions import ConnectionError, ExecutionError


@pytest.fixture
def mock_sqlite_connection() -> MagicMock:
    connection = MagicMock(spec=sqlite3.Connection)
    cursor = MagicMock()
    cursor.description = [("id", None), ("name", None)]
    cursor.fetchall.return_value = [(1, "Ann"), (2, "Bo")]
    cursor.fetchone.return_value = (1, "Ann")
    cursor.rowcount = 1
    cursor.lastrowid = 9
    connection.cursor.return_value = cursor
    return connection


@pytest.fixture
def sqlite_driver(mock_sqlite_connection: MagicMock) -> SqliteDriver:
    return SqliteDriver(mock_sqlite_connection)


def test_driver_dialect_and_quoting(sqlite_driver: SqliteDriver) -> None:
    assert sqlite_driver.dialect == "sqlite"
    assert sqlite_driver.quote("it's") == "'it''s'"
    assert sqlite_driver.quote("") == "''"


def test_fetch_all_rows(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    result = sqlite_driver.fetch("SELECT id, name FROM users")

    assert result.rows == [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bo"}]
    assert result.row_count == 2
    assert result.column_names == ["id", "name"]
    assert result.is_select_result
    cursor = mock_sqlite_connection.cursor.return_value
    cursor.execute.assert_called_once_with("SELECT id, name FROM users")
    cursor.close.assert_called_once_with()


def test_fetch_one_row_as_tuple(sqlite_driver: SqliteDriver) -> None:
    result = sqlite_driver.fetch("SELECT id, name FROM users LIMIT 1", FetchShape.TUPLE, all_rows=False)

    assert result.rows == (1, "Ann")
    assert result.row_count == 1


def test_fetch_one_row_without_match(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    mock_sqlite_connection.cursor.return_value.fetchone.return_value = None

    result = sqlite_driver.fetch("SELECT id, name FROM users LIMIT 1", all_rows=False)

    assert result.rows is None
    assert result.row_count == 0


def test_execute_reports_rowcount_and_lastrowid(sqlite_driver: SqliteDriver) -> None:
    result = sqlite_driver.execute("INSERT INTO users (name) VALUES ('Ann')")

    assert result.row_count == 1
    assert result.last_insert_id == 9
    assert not result.is_select_result


def test_execute_negative_rowcount_is_zero(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    mock_sqlite_connection.cursor.return_value.rowcount = -1

    assert sqlite_driver.execute_raw("CREATE TABLE t (a)") == 0


def test_database_errors_are_wrapped(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    mock_sqlite_connection.cursor.return_value.execute.side_effect = sqlite3.OperationalError("no such table: t")

    with pytest.raises(ExecutionError) as exc_info:
        sqlite_driver.fetch("SELECT * FROM t")

    assert exc_info.value.driver_message == "no such table: t"
    assert exc_info.value.sql == "SELECT * FROM t"
    assert sqlite_driver.last_error == "no such table: t"
    mock_sqlite_connection.cursor.return_value.close.assert_called_once_with()


def test_transaction_primitives(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    sqlite_driver.begin()
    sqlite_driver.savepoint("trans2")
    sqlite_driver.rollback_to("trans2")
    sqlite_driver.commit()
    sqlite_driver.rollback()

    mock_sqlite_connection.execute.assert_called_once_with("BEGIN")
    cursor = mock_sqlite_connection.cursor.return_value
    assert [c.args[0] for c in cursor.execute.call_args_list] == ["SAVEPOINT trans2", "ROLLBACK TO trans2"]
    mock_sqlite_connection.commit.assert_called_once_with()
    mock_sqlite_connection.rollback.assert_called_once_with()


def test_close_closes_connection(sqlite_driver: SqliteDriver, mock_sqlite_connection: MagicMock) -> None:
    sqlite_driver.close()

    mock_sqlite_connection.close.assert_called_once_with()


def test_cursor_context_closes_cursor(mock_sqlite_connection: MagicMock) -> None:
    with SqliteCursor(mock_sqlite_connection) as cursor:
        assert cursor is mock_sqlite_connection.cursor.return_value

    cursor.close.assert_called_once_with()


def test_config_rewrites_memory_database() -> None:
    config = SqliteConfig(connection_config={"database": ":memory:"})

    assert config.connection_config["database"].startswith("file:memory_")
    assert config.connection_config["uri"] is True
    assert config.connection_config["isolation_level"] is None


def test_config_defaults_to_memory_database() -> None:
    assert SqliteConfig().connection_config["uri"] is True


def test_config_enables_uri_mode_for_file_uris() -> None:
    config = SqliteConfig(connection_config={"database": "file:test.db?mode=ro"})

    assert config.connection_config["uri"] is True


def test_config_keeps_explicit_isolation_level() -> None:
    config = SqliteConfig(connection_config={"database": "app.db", "isolation_level": "DEFERRED"})

    assert config.connection_config == {"database": "app.db", "isolation_level": "DEFERRED"}


def test_config_connection_failure() -> None:
    config = SqliteConfig(connection_config={"database": "/nonexistent/dir/app.db"})

    with patch("sqlite3.connect", side_effect=sqlite3.OperationalError("unable to open database file")):
        with pytest.raises(ConnectionError):
            config.create_connection()


def test_provide_session_yields_driver() -> None:
    config = SqliteConfig()

    with config.provide_session() as driver:
        assert isinstance(driver, SqliteDriver)
        assert driver.fetch("SELECT 1 AS one").rows == [{"one": 1}]
