# arbcasino/database/models/spin.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from arbcasino.database.base import Base
from arbcasino.database.types import BigAmount
from arbcasino.game.tokens import TokenType
from arbcasino.game.wheel import SegmentName


class SpinHistory(Base):
    """
    Append-only audit log: one row per admitted spin.
    """
    __tablename__ = "spin_history"
    __table_args__ = (
        Index("ix_spin_user_created", "user_id", "created_at"),
        Index("ix_spin_win_created", "is_win", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    segment: Mapped[SegmentName] = mapped_column(Enum(SegmentName, native_enum=False), index=True)
    is_win: Mapped[bool] = mapped_column(Boolean, default=False)
    token_type: Mapped[TokenType] = mapped_column(
        Enum(TokenType, native_enum=False),
        default=TokenType.NONE,
    )
    reward_amount: Mapped[int] = mapped_column(BigAmount, default=0)

    # audit label only
    random_seed: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
