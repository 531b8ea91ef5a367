from .errors import (
    ArbCasinoError,
    DailyLimitReached,
    InvalidTokenType,
    NoPendingRewards,
    StaleSpinState,
    StorageError,
)
from .ledger import DailySpinLedger, ResetPolicy, SpinGrant, SpinWindow, UserSpinState
from .rewards import ALL, RewardAccumulator, Settlement, parse_token_selector
from .store import MemorySpinStateStore, SpinStateStore, UserLocks
from .tokens import CLAIMABLE_TOKENS, DEFAULT_TOKENS, TokenInfo, TokenType
from .wheel import SegmentName, SpinOutcome, WheelOutcomeGenerator, WheelSegment

__all__ = [
    "ArbCasinoError",
    "DailyLimitReached",
    "InvalidTokenType",
    "NoPendingRewards",
    "StaleSpinState",
    "StorageError",
    "DailySpinLedger",
    "ResetPolicy",
    "SpinGrant",
    "SpinWindow",
    "UserSpinState",
    "ALL",
    "RewardAccumulator",
    "Settlement",
    "parse_token_selector",
    "MemorySpinStateStore",
    "SpinStateStore",
    "UserLocks",
    "CLAIMABLE_TOKENS",
    "DEFAULT_TOKENS",
    "TokenInfo",
    "TokenType",
    "SegmentName",
    "SpinOutcome",
    "WheelOutcomeGenerator",
    "WheelSegment",
]
