# arbcasino/database/models/claim.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from arbcasino.database.base import Base
from arbcasino.database.types import BigAmount
from arbcasino.game.tokens import TokenType


class ClaimStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class TokenClaim(Base):
    """
    One row per token moved by a claim. The on-chain transfer is done by the
    payout operator, who then marks the row paid (with tx hash) or failed.
    """
    __tablename__ = "token_claims"
    __table_args__ = (
        Index("ix_token_claims_status_created", "status", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    token_type: Mapped[TokenType] = mapped_column(Enum(TokenType, native_enum=False), index=True)
    token_address: Mapped[str] = mapped_column(String(42))
    amount: Mapped[int] = mapped_column(BigAmount)

    recipient: Mapped[str | None] = mapped_column(String(42), nullable=True)

    status: Mapped[ClaimStatus] = mapped_column(
        Enum(ClaimStatus, native_enum=False),
        default=ClaimStatus.PENDING,
        index=True,
    )
    tx_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
