"""Unit tests for JOIN, ORDER BY, GROUP BY and paging."""

import pytest

from sqlchain.base import SQLChain
from sqlchain.exceptions import SQLBuilderError


@pytest.mark.parametrize(
    ("method", "keyword"),
    [
        ("inner_join", "INNER JOIN"),
        ("left_join", "LEFT JOIN"),
        ("right_join", "RIGHT JOIN"),
        ("full_outer_join", "FULL OUTER JOIN"),
        ("left_outer_join", "LEFT OUTER JOIN"),
        ("right_outer_join", "RIGHT OUTER JOIN"),
    ],
)
def test_join_variants(chain: SQLChain, method: str, keyword: str) -> None:
    getattr(chain.table("a"), method)("b", "a.id", "=", "b.aid")

    assert chain.get_all(render_only=True) == f"SELECT * FROM `a` {keyword} `b` ON a.id = b.aid"


def test_join_with_preformed_condition(chain: SQLChain) -> None:
    sql = chain.table("a").join("b", "a.id = b.aid AND b.active = 1").get_all(render_only=True)

    assert sql == "SELECT * FROM `a` JOIN `b` ON a.id = b.aid AND b.active = 1"


def test_join_without_condition(chain: SQLChain) -> None:
    assert chain.table("a").join("b").get_all(render_only=True) == "SELECT * FROM `a` JOIN `b`"


def test_join_with_alias_and_comparison(chain: SQLChain) -> None:
    sql = (
        chain.table("orders")
        .inner_join("users as u", "u.id", "=", "orders.user_id")
        .left_join("items", "items.order_id", "<>", "orders.id")
        .get_all(render_only=True)
    )

    assert sql == (
        "SELECT * FROM `orders` INNER JOIN `users` AS u ON u.id = orders.user_id "
        "LEFT JOIN `items` ON items.order_id <> orders.id"
    )


def test_join_rejects_unknown_type(chain: SQLChain) -> None:
    with pytest.raises(SQLBuilderError):
        chain.table("a").join("b", "a.id", "b.aid", join_type="SIDEWAYS")


def test_order_by_rules(chain: SQLChain) -> None:
    sql = (
        chain.table("t")
        .order_by("name")
        .order_by("age", "desc")
        .order_by("created_at desc")
        .get_all(render_only=True)
    )

    assert sql == "SELECT * FROM `t` ORDER BY name ASC, age DESC, created_at desc"


def test_order_by_random(chain: SQLChain) -> None:
    assert chain.table("t").order_by("RAND()").get_all(render_only=True) == "SELECT * FROM `t` ORDER BY RAND()"


def test_group_by_replaces(chain: SQLChain) -> None:
    sql = chain.table("t").group_by("a").group_by(["b", "c"]).get_all(render_only=True)

    assert sql == "SELECT * FROM `t` GROUP BY b, c"


def test_limit_with_end(chain: SQLChain) -> None:
    assert chain.table("t").limit(10, 20).get_all(render_only=True) == "SELECT * FROM `t` LIMIT 10, 20"


def test_get_forces_single_row_limit(chain: SQLChain) -> None:
    assert chain.table("t").limit(10, 20).get(render_only=True) == "SELECT * FROM `t` LIMIT 1"


@pytest.mark.parametrize(("page", "offset"), [(3, 20), (1, 0), (0, 0), (-4, 0)])
def test_pagination(chain: SQLChain, page: int, offset: int) -> None:
    chain.table("t").pagination(10, page)

    assert chain.state.limit == 10
    assert chain.state.offset == offset
    assert chain.get_all(render_only=True) == f"SELECT * FROM `t` LIMIT 10 OFFSET {offset}"


def test_pagination_rejects_negative_page_size(chain: SQLChain) -> None:
    with pytest.raises(SQLBuilderError):
        chain.table("t").pagination(-1, 2)
