# arbcasino/utils/formatting.py
from __future__ import annotations

from datetime import datetime
from typing import Mapping

from arbcasino.game.tokens import CLAIMABLE_TOKENS, TokenInfo, TokenType, format_amount
from arbcasino.game.wheel import SegmentName, SpinOutcome


def display_name(username: str | None, first_name: str | None, last_name: str | None) -> str:
    if username:
        return f"@{username}"
    name = " ".join([p for p in [first_name, last_name] if p])
    return name.strip() or "Player"


def short_address(address: str | None) -> str:
    if not address:
        return "—"
    return f"{address[:6]}…{address[-4:]}"


def token_line(token: TokenType, amount: int, tokens: Mapping[TokenType, TokenInfo]) -> str:
    info = tokens[token]
    return f"<b>{format_amount(amount, info.decimals)}</b> {info.symbol}"


def balances_block(
    balances: Mapping[TokenType, int],
    tokens: Mapping[TokenType, TokenInfo],
) -> str:
    return "\n".join(f"• {token_line(t, balances.get(t, 0), tokens)}" for t in CLAIMABLE_TOKENS)


def outcome_text(outcome: SpinOutcome, tokens: Mapping[TokenType, TokenInfo]) -> str:
    if not outcome.is_win:
        return "💥 <b>BUST!</b>\nNo luck this time."

    won = token_line(outcome.token_type, outcome.reward_amount, tokens)
    if outcome.segment == SegmentName.JACKPOT:
        return f"💎 <b>JACKPOT!</b>\nYou won {won}!"
    if outcome.segment == SegmentName.BONUS:
        return f"✨ <b>BONUS x2!</b>\nYou won {won}!"
    return f"🎉 <b>You won {won}!</b>"


def utc_stamp(value: datetime | None) -> str:
    if value is None:
        return "never"
    return f"{value:%Y-%m-%d %H:%M} UTC"
