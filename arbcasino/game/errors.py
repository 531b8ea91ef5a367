# arbcasino/game/errors.py
from __future__ import annotations

from datetime import datetime


class ArbCasinoError(Exception):
    """
    Base for every error the game core raises.

    `message` is safe to show to the end user as-is (HTML allowed).
    """

    default_message = "⚠️ Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------
# Domain errors (non-retryable: same state -> same error)
# ---------------------------------------------------------

class DailyLimitReached(ArbCasinoError):
    def __init__(self, limit: int, next_reset_at: datetime | None = None) -> None:
        self.limit = limit
        self.next_reset_at = next_reset_at

        text = f"🎰 <b>You used all {limit} spins for today.</b>\nCome back tomorrow!"
        if next_reset_at is not None:
            text += f"\n⏰ Next spin: <b>{next_reset_at:%Y-%m-%d %H:%M} UTC</b>"
        super().__init__(text)


class NoPendingRewards(ArbCasinoError):
    def __init__(self, token_label: str | None = None) -> None:
        self.token_label = token_label
        if token_label:
            text = f"🫙 <b>Nothing to claim for {token_label}.</b>\nSpin and win first!"
        else:
            text = "🫙 <b>Nothing to claim yet.</b>\nSpin and win first!"
        super().__init__(text)


class InvalidTokenType(ArbCasinoError):
    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(f"❓ Unknown token: <code>{raw}</code>")


# ---------------------------------------------------------
# Persistence errors (raised by store implementations)
# ---------------------------------------------------------

class StorageError(ArbCasinoError):
    default_message = "⚠️ Storage is unavailable right now. Please try again."


class StaleSpinState(StorageError):
    """The row changed between load and save (lost an optimistic-concurrency race)."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("⚠️ Your spin state changed meanwhile. Please try again.")
