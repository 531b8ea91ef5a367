# arbcasino/services/payouts.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.models import ClaimStatus, TokenClaim
from arbcasino.database.repo.claims_repo import resolve_claim

log = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def is_wallet_address(value: str | None) -> bool:
    return bool(value) and ADDRESS_RE.match(value.strip()) is not None


def is_tx_hash(value: str | None) -> bool:
    return bool(value) and TX_HASH_RE.match(value.strip()) is not None


@dataclass(frozen=True, slots=True)
class PayoutResult:
    ok: bool
    message: str
    claim: TokenClaim | None = None


class PayoutService:
    """
    Bookkeeping for the off-bot payout operator: the operator transfers the
    tokens, then marks each pending claim row paid (with tx hash) or failed.
    """

    @staticmethod
    async def mark_paid(session: AsyncSession, *, claim_id: int, tx_hash: str) -> PayoutResult:
        if not is_tx_hash(tx_hash):
            return PayoutResult(ok=False, message="❌ Invalid tx hash (expected 0x + 64 hex chars).")

        row = await resolve_claim(
            session,
            claim_id,
            status=ClaimStatus.PAID,
            tx_hash=tx_hash.strip(),
            from_statuses=(ClaimStatus.PENDING, ClaimStatus.FAILED),
        )
        if row is None:
            return PayoutResult(ok=False, message=f"❌ Claim #{claim_id} not found or already resolved.")

        log.info("claim %s marked paid tx=%s", claim_id, tx_hash)
        return PayoutResult(ok=True, message=f"✅ Claim #{claim_id} marked <b>paid</b>.", claim=row)

    @staticmethod
    async def mark_failed(session: AsyncSession, *, claim_id: int) -> PayoutResult:
        row = await resolve_claim(session, claim_id, status=ClaimStatus.FAILED)
        if row is None:
            return PayoutResult(ok=False, message=f"❌ Claim #{claim_id} not found or already resolved.")

        log.warning("claim %s marked failed", claim_id)
        return PayoutResult(ok=True, message=f"⚠️ Claim #{claim_id} marked <b>failed</b>.", claim=row)
