from __future__ import annotations

from datetime import datetime, timedelta, timezone


class FakeClock:
    """Manually driven clock (aware UTC)."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> datetime:
        self.current = value
        return self.current


class FixedDraw:
    """randrange() source returning preset draws in a cycle."""

    def __init__(self, *draws: int) -> None:
        self.draws = list(draws) or [0]
        self.calls = 0

    def randrange(self, stop: int) -> int:
        value = self.draws[self.calls % len(self.draws)]
        self.calls += 1
        assert 0 <= value < stop
        return value


# draws hitting each segment of the default table
DRAW_TOKEN_A = 0
DRAW_BUST = 20
DRAW_TOKEN_B = 45
DRAW_BONUS = 55
DRAW_TOKEN_C = 70
DRAW_JACKPOT = 99
