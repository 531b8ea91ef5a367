from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.models import PlayerState, SpinHistory, User
from arbcasino.utils.dt import to_naive_utc


class LeaderCategory(str, enum.Enum):
    WINS = "wins"
    SPINS = "spins"
    REWARDS = "rewards"  # lifetime base units, all tokens summed


_SCORE_COLS = {
    LeaderCategory.WINS: PlayerState.total_wins,
    LeaderCategory.SPINS: PlayerState.total_spins,
    # zero-padded string, so SQL ordering is numeric
    LeaderCategory.REWARDS: PlayerState.lifetime_rewards,
}


# ------------------------
# Shared row DTO
# ------------------------

@dataclass(frozen=True, slots=True)
class LeaderRow:
    user_id: int
    telegram_id: int
    score: int
    username: str | None
    first_name: str | None
    last_name: str | None


# =========================================================
# ALL-TIME
# =========================================================

async def get_top(
    session: AsyncSession,
    category: LeaderCategory = LeaderCategory.WINS,
    limit: int = 10,
) -> list[LeaderRow]:
    score_col = _SCORE_COLS[category]
    q = (
        select(
            PlayerState.user_id,
            score_col,
            User.telegram_id,
            User.username,
            User.first_name,
            User.last_name,
        )
        .join(User, User.id == PlayerState.user_id)
        .where(PlayerState.total_spins >= 1)
        .order_by(desc(score_col), PlayerState.user_id.asc())
        .limit(limit)
    )

    res = await session.execute(q)
    return [
        LeaderRow(
            user_id=int(user_id),
            telegram_id=int(telegram_id),
            score=int(score or 0),
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        for user_id, score, telegram_id, username, first_name, last_name in res.all()
    ]


async def get_user_rank(
    session: AsyncSession,
    user_id: int,
    category: LeaderCategory = LeaderCategory.WINS,
) -> tuple[int | None, int]:
    """
    Returns (rank, score). rank is 1-based; ties share the better rank.
    None when the user has never spun.
    """
    ps = await session.get(PlayerState, user_id)
    if ps is None or int(ps.total_spins or 0) < 1:
        return (None, 0)

    score_col = _SCORE_COLS[category]
    mine = int(getattr(ps, score_col.key) or 0)

    higher = await session.scalar(
        select(func.count(PlayerState.user_id)).where(
            PlayerState.total_spins >= 1,
            score_col > mine,
        )
    )
    return (int(higher or 0) + 1, mine)


# =========================================================
# WINDOW (weekly): from the spin_history audit log
# =========================================================

async def get_top_since(
    session: AsyncSession,
    since: datetime,
    limit: int = 10,
) -> list[LeaderRow]:
    wins = func.sum(case((SpinHistory.is_win.is_(True), 1), else_=0))
    q = (
        select(
            SpinHistory.user_id,
            wins.label("wins"),
            User.telegram_id,
            User.username,
            User.first_name,
            User.last_name,
        )
        .join(User, User.id == SpinHistory.user_id)
        .where(SpinHistory.created_at >= to_naive_utc(since))
        .group_by(
            SpinHistory.user_id,
            User.telegram_id,
            User.username,
            User.first_name,
            User.last_name,
        )
        .having(wins > 0)
        .order_by(desc(wins), SpinHistory.user_id.asc())
        .limit(limit)
    )

    res = await session.execute(q)
    return [
        LeaderRow(
            user_id=int(user_id),
            telegram_id=int(telegram_id),
            score=int(score or 0),
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        for user_id, score, telegram_id, username, first_name, last_name in res.all()
    ]
