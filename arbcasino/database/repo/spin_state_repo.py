# arbcasino/database/repo/spin_state_repo.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.models import PlayerState
from arbcasino.game.errors import StaleSpinState, StorageError
from arbcasino.game.ledger import UserSpinState
from arbcasino.game.store import SpinStateStore, UserLocks
from arbcasino.game.tokens import CLAIMABLE_TOKENS, TokenType
from arbcasino.utils.dt import as_utc, to_naive_utc

log = logging.getLogger(__name__)

_ACCUMULATED_COLS = {
    TokenType.TOKEN_1: "accumulated_token1",
    TokenType.TOKEN_2: "accumulated_token2",
    TokenType.TOKEN_3: "accumulated_token3",
}
_CLAIMED_COLS = {
    TokenType.TOKEN_1: "claimed_token1",
    TokenType.TOKEN_2: "claimed_token2",
    TokenType.TOKEN_3: "claimed_token3",
}


def row_to_state(row: PlayerState) -> UserSpinState:
    return UserSpinState(
        spins_used_today=int(row.spins_used_today or 0),
        last_spin_at=as_utc(row.last_spin_at) if row.last_spin_at else None,
        total_spins=int(row.total_spins or 0),
        total_wins=int(row.total_wins or 0),
        accumulated={t: int(getattr(row, col) or 0) for t, col in _ACCUMULATED_COLS.items()},
        claimed={t: int(getattr(row, col) or 0) for t, col in _CLAIMED_COLS.items()},
        last_claim_at=as_utc(row.last_claim_at) if row.last_claim_at else None,
        version=int(row.version or 0),
    )


def state_to_values(state: UserSpinState) -> dict:
    values = {
        "spins_used_today": int(state.spins_used_today),
        "last_spin_at": to_naive_utc(state.last_spin_at),
        "total_spins": int(state.total_spins),
        "total_wins": int(state.total_wins),
        "last_claim_at": to_naive_utc(state.last_claim_at),
    }
    for t, col in _ACCUMULATED_COLS.items():
        values[col] = int(state.accumulated.get(t, 0))
    for t, col in _CLAIMED_COLS.items():
        values[col] = int(state.claimed.get(t, 0))
    values["lifetime_rewards"] = sum(state.lifetime(t) for t in CLAIMABLE_TOKENS)
    return values


class SqlSpinStateStore(SpinStateStore):
    """
    SQLAlchemy-backed provider over `player_state`.

    Atomicity per user:
    - in-process: a shared UserLocks registry serializes same-user work
    - across processes: `version` check on UPDATE (StaleSpinState on mismatch)

    The unit of work is committed when the `lock()` block exits cleanly and
    rolled back otherwise, so the next waiter always reads committed data.
    """

    def __init__(self, session: AsyncSession, locks: UserLocks) -> None:
        self.session = session
        self.locks = locks

    @asynccontextmanager
    async def lock(self, user_id: int) -> AsyncIterator[None]:
        async with self.locks.hold(user_id):
            # start from a clean transaction (flushes e.g. the user upsert)
            await self.session.commit()
            try:
                yield
            except Exception:
                await self.session.rollback()
                raise
            try:
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                raise StorageError() from e

    async def load(self, user_id: int) -> UserSpinState:
        try:
            # create the row on first sight (idempotent)
            await self.session.execute(
                sqlite_insert(PlayerState)
                .values(user_id=user_id, **state_to_values(UserSpinState()), version=0)
                .on_conflict_do_nothing(index_elements=["user_id"])
            )
            row = await self.session.scalar(
                select(PlayerState)
                .where(PlayerState.user_id == user_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            log.exception("Failed to load player_state user_id=%s", user_id)
            raise StorageError() from e

        if row is None:
            raise StorageError()
        return row_to_state(row)

    async def save(self, user_id: int, state: UserSpinState) -> None:
        try:
            res = await self.session.execute(
                update(PlayerState)
                .where(
                    PlayerState.user_id == user_id,
                    PlayerState.version == state.version,
                )
                .values(**state_to_values(state), version=state.version + 1)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            log.exception("Failed to save player_state user_id=%s", user_id)
            raise StorageError() from e

        if res.rowcount != 1:
            log.warning("Stale player_state user_id=%s version=%s", user_id, state.version)
            raise StaleSpinState(user_id)

        state.version += 1


async def get_state(session: AsyncSession, user_id: int) -> UserSpinState:
    """Read-only snapshot (no row creation, no lock)."""
    row = await session.scalar(select(PlayerState).where(PlayerState.user_id == user_id))
    return row_to_state(row) if row is not None else UserSpinState()
