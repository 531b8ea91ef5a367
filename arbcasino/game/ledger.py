# arbcasino/game/ledger.py
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from arbcasino.game.errors import DailyLimitReached
from arbcasino.game.tokens import CLAIMABLE_TOKENS, TokenType, zero_balances
from arbcasino.game.wheel import SpinOutcome, WheelOutcomeGenerator
from arbcasino.utils.dates import next_utc_midnight
from arbcasino.utils.dt import Clock, as_utc

log = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 3


class ResetPolicy(str, enum.Enum):
    CALENDAR_DAY = "calendar"  # reset at 00:00 UTC
    ROLLING_24H = "rolling"    # reset 24h after the last spin


@dataclass(slots=True)
class UserSpinState:
    """
    Per-user spin/reward record. Persisted by a SpinStateStore; the ledger
    and the reward accumulator only ever mutate it in memory.
    """
    spins_used_today: int = 0
    last_spin_at: datetime | None = None
    total_spins: int = 0
    total_wins: int = 0
    accumulated: dict[TokenType, int] = field(default_factory=zero_balances)
    claimed: dict[TokenType, int] = field(default_factory=zero_balances)
    last_claim_at: datetime | None = None

    # optimistic-concurrency token, owned by the store
    version: int = 0

    def copy(self) -> "UserSpinState":
        return replace(self, accumulated=dict(self.accumulated), claimed=dict(self.claimed))

    def lifetime(self, token: TokenType) -> int:
        return self.claimed.get(token, 0) + self.accumulated.get(token, 0)

    @property
    def has_pending(self) -> bool:
        return any(self.accumulated.get(t, 0) > 0 for t in CLAIMABLE_TOKENS)


@dataclass(frozen=True, slots=True)
class SpinGrant:
    outcome: SpinOutcome
    spins_remaining: int


class SpinWindow:
    """
    Daily quota arithmetic: when a user's window resets and how many
    spins it has left. Read-only; never draws or mutates state.
    """

    def __init__(
        self,
        *,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        policy: ResetPolicy = ResetPolicy.CALENDAR_DAY,
        clock: Clock | None = None,
    ) -> None:
        if daily_limit <= 0:
            raise ValueError("daily_limit must be positive")
        self.daily_limit = daily_limit
        self.policy = policy
        self.clock = clock or Clock()

    def is_new_window(self, state: UserSpinState, now: datetime) -> bool:
        if state.last_spin_at is None:
            return True

        last = as_utc(state.last_spin_at)
        now = as_utc(now)
        if self.policy == ResetPolicy.ROLLING_24H:
            return now - last >= timedelta(hours=24)
        return last.date() != now.date()

    def effective_spins_used(self, state: UserSpinState, now: datetime | None = None) -> int:
        now = now or self.clock.now()
        return 0 if self.is_new_window(state, now) else int(state.spins_used_today)

    def spins_remaining(self, state: UserSpinState, now: datetime | None = None) -> int:
        return max(0, self.daily_limit - self.effective_spins_used(state, now))

    def next_reset_at(self, state: UserSpinState, now: datetime | None = None) -> datetime:
        now = as_utc(now or self.clock.now())
        if self.policy == ResetPolicy.ROLLING_24H and state.last_spin_at is not None:
            return as_utc(state.last_spin_at) + timedelta(hours=24)
        return next_utc_midnight(now)


class DailySpinLedger(SpinWindow):
    def __init__(
        self,
        generator: WheelOutcomeGenerator,
        *,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        policy: ResetPolicy = ResetPolicy.CALENDAR_DAY,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(daily_limit=daily_limit, policy=policy, clock=clock)
        self.generator = generator

    def request_spin(self, state: UserSpinState) -> SpinGrant:
        """
        Check the daily limit, draw, and fold the outcome into `state`.
        Raises DailyLimitReached without touching `state`.
        """
        now = self.clock.now()
        used = self.effective_spins_used(state, now)

        if used >= self.daily_limit:
            raise DailyLimitReached(self.daily_limit, self.next_reset_at(state, now))

        outcome = self.generator.spin()

        if outcome.is_win:
            token = outcome.token_type
            state.accumulated[token] = state.accumulated.get(token, 0) + outcome.reward_amount
            state.total_wins += 1

        state.spins_used_today = used + 1
        state.last_spin_at = now
        state.total_spins += 1

        log.debug(
            "spin: segment=%s win=%s token=%s amount=%s used=%s/%s",
            outcome.segment.value,
            outcome.is_win,
            outcome.token_type.value,
            outcome.reward_amount,
            state.spins_used_today,
            self.daily_limit,
        )

        return SpinGrant(outcome=outcome, spins_remaining=self.daily_limit - (used + 1))
