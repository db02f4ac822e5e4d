"""Mutable builder state shared by the clause accumulators."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from sqlchain.core.cache import FileCache

__all__ = ("BuilderState", "ConditionExpression", "ConditionNode")


@dataclass
class ConditionNode:
    """One fragment of a WHERE or HAVING expression.

    ``opens`` and ``closes`` count the parentheses placed around the fragment
    by ``grouped`` scopes.
    """

    connector: str
    fragment: str
    opens: int = 0
    closes: int = 0

    def render(self) -> str:
        return "(" * self.opens + self.fragment + ")" * self.closes


@dataclass
class ConditionExpression:
    """Ordered list of connector/fragment nodes.

    The connector of the first node is never rendered.
    """

    nodes: "list[ConditionNode]" = field(default_factory=list)
    pending_opens: int = 0

    def __bool__(self) -> bool:
        return bool(self.nodes)

    def append(self, fragment: str, connector: str = "AND") -> None:
        self.nodes.append(ConditionNode(connector=connector, fragment=fragment, opens=self.pending_opens))
        self.pending_opens = 0

    def open_group(self) -> None:
        self.pending_opens += 1

    def close_group(self) -> None:
        """Close the innermost group.

        A group whose scope appended nothing is dropped instead of rendering ``()``.
        """
        if self.pending_opens:
            self.pending_opens -= 1
            return
        if self.nodes:
            self.nodes[-1].closes += 1

    @property
    def connectors(self) -> "list[str]":
        return [node.connector for node in self.nodes[1:]]

    def render(self) -> Optional[str]:
        if not self.nodes:
            return None
        first, *rest = self.nodes
        parts = [first.render()]
        parts.extend(f"{node.connector} {node.render()}" for node in rest)
        return " ".join(parts)

    def clear(self) -> None:
        self.nodes.clear()
        self.pending_opens = 0


@dataclass
class BuilderState:
    """Clause accumulators and last-statement bookkeeping for one builder."""

    table_prefix: str = ""
    select_list: str = "*"
    from_clause: Optional[str] = None
    join_clauses: "list[str]" = field(default_factory=list)
    where: ConditionExpression = field(default_factory=ConditionExpression)
    having: ConditionExpression = field(default_factory=ConditionExpression)
    group_by: Optional[str] = None
    order_by: Optional[str] = None
    limit: Optional[int] = None
    limit_end: Optional[int] = None
    offset: Optional[int] = None
    last_query: Optional[str] = None
    last_error: Optional[str] = None
    row_count: int = 0
    last_insert_id: Any = None
    transaction_depth: int = 0
    active_cache: "Optional[FileCache]" = None

    def reset_clauses(self) -> None:
        """Restore every clause accumulator to its default."""
        self.select_list = "*"
        self.from_clause = None
        self.join_clauses = []
        self.where = ConditionExpression()
        self.having = ConditionExpression()
        self.group_by = None
        self.order_by = None
        self.limit = None
        self.limit_end = None
        self.offset = None
        self.active_cache = None

    def reset(self) -> None:
        """Restore clauses and per-statement results.

        The prefix and the transaction depth outlive a statement.
        """
        self.reset_clauses()
        self.last_query = None
        self.last_error = None
        self.row_count = 0
        self.last_insert_id = None
