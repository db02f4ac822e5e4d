from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from sqlchain.adapters.sqlite import SqliteDriver
from sqlchain.base import SQLChain
from sqlchain.config import BuilderConfig
from sqlchain.driver import ExecutionResult

if TYPE_CHECKING:
    from collections.abc import Generator

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def builder_config(tmp_path: Path) -> BuilderConfig:
    return BuilderConfig(cache_dir=tmp_path / "cache")


@pytest.fixture
def sqlite_quote() -> MagicMock:
    """A real SQLite literal quoter, independent of any connection."""
    return MagicMock(side_effect=SqliteDriver(MagicMock()).quote)


@pytest.fixture
def mock_driver(sqlite_quote: MagicMock) -> MagicMock:
    """A driver double returning an empty result set and one affected row."""
    driver = MagicMock(spec=SqliteDriver)
    driver.quote = sqlite_quote
    driver.fetch.return_value = ExecutionResult(
        rows=[], row_count=0, last_insert_id=None, column_names=[], is_select_result=True
    )
    driver.execute.return_value = ExecutionResult(
        rows=None, row_count=1, last_insert_id=7, column_names=[], is_select_result=False
    )
    return driver


@pytest.fixture
def chain(mock_driver: MagicMock, builder_config: BuilderConfig) -> SQLChain:
    return SQLChain(mock_driver, builder_config)


@pytest.fixture
def sqlite_chain(builder_config: BuilderConfig) -> Generator[SQLChain, None, None]:
    with SQLChain.from_sqlite(":memory:", builder_config) as db:
        yield db
