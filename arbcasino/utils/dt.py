from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo


@dataclass(frozen=True, slots=True)
class Clock:
    timezone: str = "UTC"

    def now(self) -> datetime:
        tz = ZoneInfo(self.timezone)
        return datetime.now(tz=tz)


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime. Naive values (SQLite round-trips) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime | None) -> datetime | None:
    # DB columns are DateTime(timezone=False), stored as UTC
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)
