# arbcasino/game/tokens.py
from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(str, enum.Enum):
    TOKEN_1 = "TOKEN_1"
    TOKEN_2 = "TOKEN_2"
    TOKEN_3 = "TOKEN_3"
    NONE = "NONE"  # BUST


CLAIMABLE_TOKENS: tuple[TokenType, ...] = (
    TokenType.TOKEN_1,
    TokenType.TOKEN_2,
    TokenType.TOKEN_3,
)

TOKEN_DECIMALS = 18
ONE_TOKEN = 10**TOKEN_DECIMALS


@dataclass(frozen=True, slots=True)
class TokenInfo:
    symbol: str
    address: str
    decimals: int = TOKEN_DECIMALS


# Arbitrum Sepolia test tokens
DEFAULT_TOKENS: dict[TokenType, TokenInfo] = {
    TokenType.TOKEN_1: TokenInfo("AIDOGE", "0x287396E90c5febB4dC1EDbc0EEF8e5668cdb08D4"),
    TokenType.TOKEN_2: TokenInfo("BOOP", "0x0E1CD6557D2BA59C61c75850E674C2AD73253952"),
    TokenType.TOKEN_3: TokenInfo("BOBOTRUM", "0xaeA5bb4F5b5524dee0E3F931911c8F8df4576E19"),
}


def zero_balances() -> dict[TokenType, int]:
    return {t: 0 for t in CLAIMABLE_TOKENS}


def format_amount(amount: int, decimals: int = TOKEN_DECIMALS) -> str:
    """
    Base units -> human string, exact (no float).
      1500000000000000000 -> "1.5"
      0 -> "0"
    """
    whole, frac = divmod(int(amount), 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_text}" if frac_text else str(whole)
