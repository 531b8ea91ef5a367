# arbcasino/database/types.py
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class BigAmount(TypeDecorator):
    """
    Arbitrary-precision non-negative integer stored as a decimal string.
    18-decimal token amounts overflow SQLite INTEGER quickly.
    """

    impl = String(80)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return "0"
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None or value == "":
            return 0
        return int(value)


class SortableAmount(BigAmount):
    """
    BigAmount zero-padded to a fixed width, so string order in SQL matches
    numeric order (ORDER BY and comparisons work without casting).
    78 digits holds any uint256.
    """

    width = 78
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return super().process_bind_param(value, dialect).zfill(self.width)
