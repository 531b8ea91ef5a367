# arbcasino/database/repo/spin_history_repo.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.models import SpinHistory
from arbcasino.game.wheel import SpinOutcome
from arbcasino.utils.dt import to_naive_utc


async def add_spin(
    session: AsyncSession,
    *,
    user_id: int,
    outcome: SpinOutcome,
    spun_at: datetime | None = None,
) -> SpinHistory:
    row = SpinHistory(
        user_id=user_id,
        segment=outcome.segment,
        is_win=outcome.is_win,
        token_type=outcome.token_type,
        reward_amount=outcome.reward_amount,
        random_seed=outcome.random_seed[:64] if outcome.random_seed else None,
    )
    if spun_at is not None:
        row.created_at = to_naive_utc(spun_at)

    session.add(row)
    await session.flush()
    return row


async def recent_spins(session: AsyncSession, user_id: int, limit: int = 5) -> list[SpinHistory]:
    res = await session.execute(
        select(SpinHistory)
        .where(SpinHistory.user_id == user_id)
        .order_by(desc(SpinHistory.created_at), desc(SpinHistory.id))
        .limit(limit)
    )
    return list(res.scalars().all())


async def count_spins(session: AsyncSession, *, since: datetime | None = None) -> tuple[int, int]:
    """(spins, wins) across all users, optionally since a moment."""
    q = select(
        func.count(SpinHistory.id),
        func.coalesce(func.sum(case((SpinHistory.is_win.is_(True), 1), else_=0)), 0),
    )
    if since is not None:
        q = q.where(SpinHistory.created_at >= to_naive_utc(since))

    spins, wins = (await session.execute(q)).one()
    return int(spins or 0), int(wins or 0)
