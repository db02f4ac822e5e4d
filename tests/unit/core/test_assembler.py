"""Unit tests for placeholder binding and statement classification."""

import pytest

from sqlchain.core import bind_placeholders, is_read_statement


def _escape(value: object) -> str:
    return repr(value)


def test_bind_placeholders_left_to_right() -> None:
    assert bind_placeholders("a = ? AND b = ?", [1, "x"], _escape) == "a = 1 AND b = 'x'"


def test_unmatched_placeholders_are_left_blank() -> None:
    assert bind_placeholders("a IN (?, ?, ?)", [1], _escape) == "a IN (1, , )"


def test_extra_values_are_ignored() -> None:
    assert bind_placeholders("a = ?", [1, 2], _escape) == "a = 1"


def test_text_without_placeholders_is_unchanged() -> None:
    assert bind_placeholders("SELECT 1", [1], _escape) == "SELECT 1"


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT * FROM t", True),
        ("  select 1", True),
        ("OPTIMIZE TABLE `t`", True),
        ("CHECK TABLE `t`", True),
        ("checksum table `t`", True),
        ("ANALYZE TABLE `t`", True),
        ("REPAIR TABLE `t`", True),
        ("INSERT INTO t (a) VALUES (1)", False),
        ("UPDATE t SET a=1", False),
        ("TRUNCATE TABLE `t`", False),
        ("DESCRIBE `t`", False),
    ],
)
def test_is_read_statement(sql: str, expected: bool) -> None:
    assert is_read_statement(sql) is expected
