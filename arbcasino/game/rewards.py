# arbcasino/game/rewards.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from arbcasino.game.errors import InvalidTokenType, NoPendingRewards
from arbcasino.game.ledger import UserSpinState
from arbcasino.game.tokens import CLAIMABLE_TOKENS, DEFAULT_TOKENS, TokenInfo, TokenType, zero_balances
from arbcasino.utils.dt import Clock

log = logging.getLogger(__name__)

ALL = "ALL"


@dataclass(frozen=True, slots=True)
class Settlement:
    """Amounts moved from `accumulated` to `claimed`, for all three tokens."""
    amounts: dict[TokenType, int]
    settled_at: datetime

    @property
    def total(self) -> int:
        return sum(self.amounts.values())

    def moved(self) -> dict[TokenType, int]:
        return {t: a for t, a in self.amounts.items() if a > 0}


def parse_token_selector(
    raw: str | TokenType | None,
    tokens: Mapping[TokenType, TokenInfo] = DEFAULT_TOKENS,
) -> TokenType | str:
    """
    User input -> TokenType or ALL.
    Accepts: "all", "TOKEN_1", "token1", "1", symbol ("AIDOGE"), TokenType.
    """
    if isinstance(raw, TokenType):
        if raw not in CLAIMABLE_TOKENS:
            raise InvalidTokenType(raw.value)
        return raw

    text = (raw or "").strip()
    if not text or text.upper() == ALL:
        return ALL

    key = text.upper().replace("-", "_")
    for t in CLAIMABLE_TOKENS:
        number = t.value[-1]
        if key in {t.value, t.value.replace("_", ""), number}:
            return t
        info = tokens.get(t)
        if info and key == info.symbol.upper():
            return t

    raise InvalidTokenType(text)


class RewardAccumulator:
    def __init__(
        self,
        *,
        tokens: Mapping[TokenType, TokenInfo] = DEFAULT_TOKENS,
        clock: Clock | None = None,
    ) -> None:
        self.tokens = dict(tokens)
        self.clock = clock or Clock()

    def _label(self, token: TokenType) -> str:
        info = self.tokens.get(token)
        return info.symbol if info else token.value

    def _move(self, state: UserSpinState, token: TokenType) -> int:
        amount = int(state.accumulated.get(token, 0))
        if amount <= 0:
            return 0
        state.accumulated[token] = 0
        state.claimed[token] = state.claimed.get(token, 0) + amount
        return amount

    def settle_one(self, state: UserSpinState, token: TokenType) -> Settlement:
        if token not in CLAIMABLE_TOKENS:
            raise InvalidTokenType(getattr(token, "value", token))

        if int(state.accumulated.get(token, 0)) <= 0:
            raise NoPendingRewards(self._label(token))

        now = self.clock.now()
        amounts = zero_balances()
        amounts[token] = self._move(state, token)
        state.last_claim_at = now

        log.info("settled %s=%s", token.value, amounts[token])
        return Settlement(amounts=amounts, settled_at=now)

    def settle_all(self, state: UserSpinState) -> Settlement:
        if not state.has_pending:
            raise NoPendingRewards()

        now = self.clock.now()
        amounts = zero_balances()
        for token in CLAIMABLE_TOKENS:
            amounts[token] = self._move(state, token)
        state.last_claim_at = now

        log.info("settled all: %s", {t.value: a for t, a in amounts.items()})
        return Settlement(amounts=amounts, settled_at=now)

    def settle(self, state: UserSpinState, selector: TokenType | str) -> Settlement:
        if selector == ALL:
            return self.settle_all(state)
        if not isinstance(selector, TokenType):
            selector = parse_token_selector(selector, self.tokens)
            if selector == ALL:
                return self.settle_all(state)
        return self.settle_one(state, selector)
