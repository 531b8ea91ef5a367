# arbcasino/game/wheel.py
from __future__ import annotations

import enum
import secrets
from dataclasses import dataclass
from fractions import Fraction
from typing import Mapping, Protocol, Sequence

from arbcasino.game.tokens import ONE_TOKEN, TokenType


class SegmentName(str, enum.Enum):
    TOKEN_A = "TOKEN_A"
    TOKEN_B = "TOKEN_B"
    TOKEN_C = "TOKEN_C"
    BONUS = "BONUS"
    JACKPOT = "JACKPOT"
    BUST = "BUST"


@dataclass(frozen=True, slots=True)
class WheelSegment:
    name: SegmentName
    weight: int


@dataclass(frozen=True, slots=True)
class RewardRule:
    token_type: TokenType
    base_amount: int
    multiplier: int = 1

    @property
    def amount(self) -> int:
        return self.base_amount * self.multiplier


@dataclass(frozen=True, slots=True)
class SpinOutcome:
    segment: SegmentName
    is_win: bool
    token_type: TokenType
    reward_amount: int
    random_seed: str


# Declaration order matters: it is the walk order of the draw.
DEFAULT_SEGMENTS: tuple[WheelSegment, ...] = (
    WheelSegment(SegmentName.TOKEN_A, 15),
    WheelSegment(SegmentName.BUST, 25),
    WheelSegment(SegmentName.TOKEN_B, 12),
    WheelSegment(SegmentName.BONUS, 8),
    WheelSegment(SegmentName.TOKEN_C, 15),
    WheelSegment(SegmentName.BUST, 20),
    WheelSegment(SegmentName.TOKEN_A, 3),
    WheelSegment(SegmentName.JACKPOT, 2),
)

DEFAULT_REWARD_RULES: dict[SegmentName, RewardRule] = {
    SegmentName.TOKEN_A: RewardRule(TokenType.TOKEN_1, ONE_TOKEN),
    SegmentName.TOKEN_B: RewardRule(TokenType.TOKEN_2, 2 * ONE_TOKEN),
    SegmentName.TOKEN_C: RewardRule(TokenType.TOKEN_3, ONE_TOKEN // 2),
    SegmentName.BONUS: RewardRule(TokenType.TOKEN_2, 2 * ONE_TOKEN, multiplier=2),
    SegmentName.JACKPOT: RewardRule(TokenType.TOKEN_1, ONE_TOKEN, multiplier=10),
}


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class WheelOutcomeGenerator:
    """
    Weighted wheel draw over a static segment table.

    The draw is an integer in [0, total_weight); the first segment whose
    cumulative weight is strictly greater than the draw wins. Stateless
    apart from the random source, never fails, never does I/O.
    """

    def __init__(
        self,
        segments: Sequence[WheelSegment] = DEFAULT_SEGMENTS,
        rules: Mapping[SegmentName, RewardRule] = DEFAULT_REWARD_RULES,
        rng: RandomSource | None = None,
    ) -> None:
        if not segments:
            raise ValueError("Wheel needs at least one segment")

        for seg in segments:
            if int(seg.weight) <= 0:
                raise ValueError(f"Segment weight must be positive: {seg.name.value}={seg.weight}")
            if seg.name != SegmentName.BUST and seg.name not in rules:
                raise ValueError(f"No reward rule for segment {seg.name.value}")

        self.segments: tuple[WheelSegment, ...] = tuple(segments)
        self.rules: dict[SegmentName, RewardRule] = dict(rules)
        self.total_weight: int = sum(int(s.weight) for s in self.segments)

        # SystemRandom: the outcome must not be predictable from the client side.
        self._rng: RandomSource = rng or secrets.SystemRandom()

    def segment_at(self, r: int) -> SegmentName:
        if not 0 <= r < self.total_weight:
            raise ValueError(f"Draw {r} outside [0, {self.total_weight})")

        cumulative = 0
        for seg in self.segments:
            cumulative += seg.weight
            if cumulative > r:
                return seg.name

        # unreachable: cumulative ends at total_weight > r
        return self.segments[-1].name

    def resolve(self, segment: SegmentName, random_seed: str = "") -> SpinOutcome:
        if segment == SegmentName.BUST:
            return SpinOutcome(
                segment=segment,
                is_win=False,
                token_type=TokenType.NONE,
                reward_amount=0,
                random_seed=random_seed,
            )

        rule = self.rules[segment]
        return SpinOutcome(
            segment=segment,
            is_win=True,
            token_type=rule.token_type,
            reward_amount=rule.amount,
            random_seed=random_seed,
        )

    def spin(self) -> SpinOutcome:
        r = self._rng.randrange(self.total_weight)
        # audit label only; the outcome is already fixed by `r`
        seed = secrets.token_hex(16)
        return self.resolve(self.segment_at(r), random_seed=seed)

    # -------------------------------------------------
    # Odds reporting
    # -------------------------------------------------

    def segment_probabilities(self) -> dict[SegmentName, Fraction]:
        """Probability mass per segment name (duplicate slots are summed)."""
        out: dict[SegmentName, Fraction] = {}
        for seg in self.segments:
            out[seg.name] = out.get(seg.name, Fraction(0)) + Fraction(seg.weight, self.total_weight)
        return out

    def expected_value(self) -> dict[TokenType, Fraction]:
        """Expected base units per spin, per token."""
        ev: dict[TokenType, Fraction] = {}
        for name, p in self.segment_probabilities().items():
            if name == SegmentName.BUST:
                continue
            rule = self.rules[name]
            ev[rule.token_type] = ev.get(rule.token_type, Fraction(0)) + p * rule.amount
        return ev

    def win_probability(self) -> Fraction:
        return 1 - self.segment_probabilities().get(SegmentName.BUST, Fraction(0))
