# arbcasino/services/game.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import GameConfig
from arbcasino.database.repo.claims_repo import add_claims
from arbcasino.database.repo.spin_history_repo import add_spin
from arbcasino.database.repo.spin_state_repo import SqlSpinStateStore
from arbcasino.game.errors import StaleSpinState
from arbcasino.game.ledger import DailySpinLedger, UserSpinState
from arbcasino.game.rewards import ALL, RewardAccumulator, Settlement, parse_token_selector
from arbcasino.game.store import SpinStateStore, UserLocks
from arbcasino.game.tokens import TokenInfo, TokenType
from arbcasino.game.wheel import SpinOutcome, WheelOutcomeGenerator
from arbcasino.utils.dt import Clock

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpinReceipt:
    outcome: SpinOutcome
    spins_remaining: int
    pending: dict[TokenType, int]
    total_spins: int
    total_wins: int


@dataclass(frozen=True, slots=True)
class ClaimReceipt:
    settlement: Settlement
    claim_ids: list[int] = field(default_factory=list)


class GameJournal(Protocol):
    async def record_spin(self, user_id: int, outcome: SpinOutcome, spun_at: datetime | None) -> None: ...

    async def record_claim(
        self, user_id: int, settlement: Settlement, recipient: str | None
    ) -> list[int]: ...


class SqlGameJournal:
    """Writes spin_history / token_claims rows inside the caller's unit of work."""

    def __init__(self, session: AsyncSession, tokens: Mapping[TokenType, TokenInfo]) -> None:
        self.session = session
        self.tokens = tokens

    async def record_spin(self, user_id: int, outcome: SpinOutcome, spun_at: datetime | None) -> None:
        await add_spin(self.session, user_id=user_id, outcome=outcome, spun_at=spun_at)

    async def record_claim(
        self, user_id: int, settlement: Settlement, recipient: str | None
    ) -> list[int]:
        rows = await add_claims(
            self.session,
            user_id=user_id,
            settlement=settlement,
            tokens=self.tokens,
            recipient=recipient,
        )
        return [r.id for r in rows]


class GameService:
    """
    spin(user_id) / claim(user_id, token|ALL).

    Each call is one load -> check -> mutate -> save cycle under the store's
    per-user lock. Lost optimistic-concurrency races are retried a few times
    (nothing was committed for the losing attempt), then surfaced.
    """

    MAX_ATTEMPTS = 3

    def __init__(
        self,
        store: SpinStateStore,
        ledger: DailySpinLedger,
        accumulator: RewardAccumulator,
        *,
        journal: GameJournal | None = None,
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.accumulator = accumulator
        self.journal = journal

    @classmethod
    def for_session(
        cls,
        session: AsyncSession,
        *,
        locks: UserLocks,
        config: GameConfig,
        clock: Clock | None = None,
        generator: WheelOutcomeGenerator | None = None,
    ) -> "GameService":
        clock = clock or Clock()
        ledger = DailySpinLedger(
            generator or WheelOutcomeGenerator(),
            daily_limit=config.daily_limit,
            policy=config.reset_policy,
            clock=clock,
        )
        return cls(
            SqlSpinStateStore(session, locks),
            ledger,
            RewardAccumulator(tokens=config.tokens, clock=clock),
            journal=SqlGameJournal(session, config.tokens),
        )

    # -------------------------------------------------
    # Spin
    # -------------------------------------------------

    async def spin(self, user_id: int) -> SpinReceipt:
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                async with self.store.lock(user_id):
                    state = await self.store.load(user_id)
                    grant = self.ledger.request_spin(state)
                    await self.store.save(user_id, state)

                    if self.journal is not None:
                        await self.journal.record_spin(user_id, grant.outcome, state.last_spin_at)
            except StaleSpinState:
                if attempt == self.MAX_ATTEMPTS:
                    raise
                log.warning("spin retry user_id=%s attempt=%s", user_id, attempt)
                continue

            log.info(
                "spin user_id=%s segment=%s token=%s amount=%s remaining=%s",
                user_id,
                grant.outcome.segment.value,
                grant.outcome.token_type.value,
                grant.outcome.reward_amount,
                grant.spins_remaining,
            )
            return SpinReceipt(
                outcome=grant.outcome,
                spins_remaining=grant.spins_remaining,
                pending=dict(state.accumulated),
                total_spins=state.total_spins,
                total_wins=state.total_wins,
            )

        raise StaleSpinState(user_id)  # pragma: no cover

    # -------------------------------------------------
    # Claim
    # -------------------------------------------------

    async def claim(
        self,
        user_id: int,
        selector: TokenType | str = ALL,
        *,
        recipient: str | None = None,
    ) -> ClaimReceipt:
        # reject unknown tokens before touching state
        selector = parse_token_selector(selector, self.accumulator.tokens)

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                async with self.store.lock(user_id):
                    state = await self.store.load(user_id)
                    settlement = self.accumulator.settle(state, selector)
                    await self.store.save(user_id, state)

                    claim_ids: list[int] = []
                    if self.journal is not None:
                        claim_ids = await self.journal.record_claim(user_id, settlement, recipient)
            except StaleSpinState:
                if attempt == self.MAX_ATTEMPTS:
                    raise
                log.warning("claim retry user_id=%s attempt=%s", user_id, attempt)
                continue

            log.info(
                "claim user_id=%s moved=%s recipient=%s",
                user_id,
                {t.value: a for t, a in settlement.moved().items()},
                recipient,
            )
            return ClaimReceipt(settlement=settlement, claim_ids=claim_ids)

        raise StaleSpinState(user_id)  # pragma: no cover

    # -------------------------------------------------
    # Read side
    # -------------------------------------------------

    async def snapshot(self, user_id: int) -> UserSpinState:
        async with self.store.lock(user_id):
            return await self.store.load(user_id)
