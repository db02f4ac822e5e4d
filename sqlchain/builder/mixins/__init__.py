from sqlchain.builder.mixins._from import FromClauseMixin
from sqlchain.builder.mixins._join import JoinClauseMixin
from sqlchain.builder.mixins._limit_offset import LimitOffsetClauseMixin
from sqlchain.builder.mixins._order_by import GroupByClauseMixin, OrderByClauseMixin
from sqlchain.builder.mixins._select_columns import SelectColumnsMixin
from sqlchain.builder.mixins._where import HavingClauseMixin, WhereClauseMixin

__all__ = (
    "FromClauseMixin",
    "GroupByClauseMixin",
    "HavingClauseMixin",
    "JoinClauseMixin",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "SelectColumnsMixin",
    "WhereClauseMixin",
)
