from __future__ import annotations

from datetime import datetime, time, timedelta, timezone


def next_utc_midnight(moment: datetime) -> datetime:
    day = moment.astimezone(timezone.utc).date() + timedelta(days=1)
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
