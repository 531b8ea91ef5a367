# arbcasino/database/repo/claims_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.models import ClaimStatus, TokenClaim, User
from arbcasino.game.rewards import Settlement
from arbcasino.game.tokens import TokenInfo, TokenType
from arbcasino.utils.dt import to_naive_utc


async def add_claims(
    session: AsyncSession,
    *,
    user_id: int,
    settlement: Settlement,
    tokens: Mapping[TokenType, TokenInfo],
    recipient: str | None,
) -> list[TokenClaim]:
    """One pending row per token actually moved."""
    rows: list[TokenClaim] = []
    for token, amount in settlement.moved().items():
        row = TokenClaim(
            user_id=user_id,
            token_type=token,
            token_address=tokens[token].address,
            amount=amount,
            recipient=recipient,
            status=ClaimStatus.PENDING,
            created_at=to_naive_utc(settlement.settled_at),
        )
        session.add(row)
        rows.append(row)

    await session.flush()
    return rows


async def list_pending(session: AsyncSession, limit: int = 20) -> list[tuple[TokenClaim, User]]:
    res = await session.execute(
        select(TokenClaim, User)
        .join(User, User.id == TokenClaim.user_id)
        .where(TokenClaim.status == ClaimStatus.PENDING)
        .order_by(TokenClaim.created_at.asc(), TokenClaim.id.asc())
        .limit(limit)
    )
    return [(c, u) for c, u in res.all()]


async def count_by_status(session: AsyncSession) -> dict[str, int]:
    res = await session.execute(
        select(TokenClaim.status, func.count(TokenClaim.id)).group_by(TokenClaim.status)
    )
    counts = {s.value: 0 for s in ClaimStatus}
    for status, n in res.all():
        key = status.value if isinstance(status, ClaimStatus) else str(status)
        counts[key] = int(n or 0)
    return counts


async def resolve_claim(
    session: AsyncSession,
    claim_id: int,
    *,
    status: ClaimStatus,
    tx_hash: str | None = None,
    from_statuses: tuple[ClaimStatus, ...] = (ClaimStatus.PENDING,),
) -> TokenClaim | None:
    """
    pending -> paid/failed (a failed payout may later be retried and marked paid).
    Returns None if the claim is missing or not in one of `from_statuses`.
    """
    row = await session.get(TokenClaim, claim_id)
    if row is None or row.status not in from_statuses:
        return None

    row.status = status
    row.tx_hash = tx_hash
    row.resolved_at = to_naive_utc(datetime.now(timezone.utc))
    await session.flush()
    return row
