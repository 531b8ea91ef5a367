# arbcasino/database/models/player_state.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arbcasino.database.base import Base
from arbcasino.database.types import BigAmount, SortableAmount

if TYPE_CHECKING:
    from arbcasino.database.models.user import User


class PlayerState(Base):
    """
    One row per user: daily spin counter, lifetime counters and
    pending/claimed balances per token slot.
    `version` bumps on every save (optimistic concurrency).
    """
    __tablename__ = "player_state"
    __table_args__ = (
        Index("ix_player_state_wins", "total_wins"),
        Index("ix_player_state_spins", "total_spins"),
        Index("ix_player_state_rewards", "lifetime_rewards"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    spins_used_today: Mapped[int] = mapped_column(Integer, default=0)
    last_spin_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    total_spins: Mapped[int] = mapped_column(Integer, default=0)
    total_wins: Mapped[int] = mapped_column(Integer, default=0)

    accumulated_token1: Mapped[int] = mapped_column(BigAmount, default=0)
    accumulated_token2: Mapped[int] = mapped_column(BigAmount, default=0)
    accumulated_token3: Mapped[int] = mapped_column(BigAmount, default=0)

    claimed_token1: Mapped[int] = mapped_column(BigAmount, default=0)
    claimed_token2: Mapped[int] = mapped_column(BigAmount, default=0)
    claimed_token3: Mapped[int] = mapped_column(BigAmount, default=0)

    # accumulated + claimed over every token, kept for the rewards leaderboard
    lifetime_rewards: Mapped[int] = mapped_column(SortableAmount, default=0)

    last_claim_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    version: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )

    user: Mapped["User"] = relationship(back_populates="player_state")
