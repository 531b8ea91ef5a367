"""
Claim settlement and token selector parsing.
"""

import random
import unittest

from arbcasino.game.errors import InvalidTokenType, NoPendingRewards
from arbcasino.game.ledger import DailySpinLedger, UserSpinState
from arbcasino.game.rewards import ALL, RewardAccumulator, parse_token_selector
from arbcasino.game.tokens import CLAIMABLE_TOKENS, TokenType, format_amount
from arbcasino.game.wheel import WheelOutcomeGenerator
from tests._support import FakeClock


def state_with(t1=0, t2=0, t3=0):
    state = UserSpinState()
    state.accumulated.update({TokenType.TOKEN_1: t1, TokenType.TOKEN_2: t2, TokenType.TOKEN_3: t3})
    return state


class TestSettleAll(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.acc = RewardAccumulator(clock=self.clock)

    def test_moves_every_balance(self):
        state = state_with(5000, 0, 200)
        settlement = self.acc.settle_all(state)

        self.assertEqual(
            settlement.amounts,
            {TokenType.TOKEN_1: 5000, TokenType.TOKEN_2: 0, TokenType.TOKEN_3: 200},
        )
        self.assertEqual(settlement.total, 5200)
        self.assertEqual(settlement.moved(), {TokenType.TOKEN_1: 5000, TokenType.TOKEN_3: 200})
        self.assertEqual(settlement.settled_at, self.clock.now())

        self.assertTrue(all(state.accumulated[t] == 0 for t in CLAIMABLE_TOKENS))
        self.assertEqual(state.claimed[TokenType.TOKEN_1], 5000)
        self.assertEqual(state.claimed[TokenType.TOKEN_3], 200)
        self.assertEqual(state.last_claim_at, self.clock.now())

    def test_second_claim_has_nothing(self):
        state = state_with(5000, 0, 200)
        self.acc.settle_all(state)
        with self.assertRaises(NoPendingRewards):
            self.acc.settle_all(state)

    def test_empty_state_untouched(self):
        state = UserSpinState()
        with self.assertRaises(NoPendingRewards):
            self.acc.settle_all(state)
        self.assertIsNone(state.last_claim_at)


class TestSettleOne(unittest.TestCase):

    def setUp(self):
        self.acc = RewardAccumulator(clock=FakeClock())

    def test_moves_only_selected_token(self):
        state = state_with(7, 11, 13)
        settlement = self.acc.settle_one(state, TokenType.TOKEN_2)

        self.assertEqual(settlement.amounts[TokenType.TOKEN_2], 11)
        self.assertEqual(settlement.amounts[TokenType.TOKEN_1], 0)
        self.assertEqual(settlement.amounts[TokenType.TOKEN_3], 0)
        self.assertEqual(state.accumulated[TokenType.TOKEN_1], 7)
        self.assertEqual(state.accumulated[TokenType.TOKEN_2], 0)
        self.assertEqual(state.claimed[TokenType.TOKEN_2], 11)

    def test_zero_balance_names_the_token(self):
        state = state_with(7, 0, 0)
        with self.assertRaises(NoPendingRewards) as ctx:
            self.acc.settle_one(state, TokenType.TOKEN_2)
        self.assertEqual(ctx.exception.token_label, "BOOP")
        self.assertEqual(state.accumulated[TokenType.TOKEN_1], 7)
        self.assertIsNone(state.last_claim_at)

    def test_none_is_not_claimable(self):
        state = state_with(7, 0, 0)
        with self.assertRaises(InvalidTokenType):
            self.acc.settle_one(state, TokenType.NONE)
        self.assertEqual(state.accumulated[TokenType.TOKEN_1], 7)

    def test_settle_dispatches_on_selector(self):
        state = state_with(1, 2, 3)
        self.assertEqual(self.acc.settle(state, "bobotrum").total, 3)
        self.assertEqual(self.acc.settle(state, ALL).total, 3)
        self.assertFalse(state.has_pending)


class TestSelector(unittest.TestCase):

    def test_all_forms(self):
        for raw in (None, "", "  ", "all", "ALL", "All"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_token_selector(raw), ALL)

    def test_token_forms(self):
        for raw in ("TOKEN_2", "token_2", "TOKEN2", "token-2", "2", "boop", "BOOP"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_token_selector(raw), TokenType.TOKEN_2)

    def test_token_type_passthrough(self):
        self.assertEqual(parse_token_selector(TokenType.TOKEN_3), TokenType.TOKEN_3)

    def test_rejects_unknown(self):
        for raw in ("doge", "TOKEN_4", "4", "NONE", TokenType.NONE):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidTokenType):
                    parse_token_selector(raw)


class TestLifetimeTotals(unittest.TestCase):

    def test_claimed_plus_accumulated_never_decreases(self):
        clock = FakeClock()
        ledger = DailySpinLedger(WheelOutcomeGenerator(rng=random.Random(99)), clock=clock)
        acc = RewardAccumulator(clock=clock)
        state = UserSpinState()
        pick = random.Random(3)
        previous = {t: 0 for t in CLAIMABLE_TOKENS}

        for _ in range(300):
            if ledger.spins_remaining(state) == 0:
                clock.advance(days=1)
            if pick.random() < 0.7:
                ledger.request_spin(state)
            elif state.has_pending:
                pending = [t for t in CLAIMABLE_TOKENS if state.accumulated[t] > 0]
                acc.settle(state, pick.choice([ALL, *pending]))

            for t in CLAIMABLE_TOKENS:
                self.assertGreaterEqual(state.lifetime(t), previous[t])
                previous[t] = state.lifetime(t)


class TestFormatAmount(unittest.TestCase):

    def test_base_units_to_display(self):
        self.assertEqual(format_amount(1_500_000_000_000_000_000), "1.5")
        self.assertEqual(format_amount(10**19), "10")
        self.assertEqual(format_amount(0), "0")
        self.assertEqual(format_amount(1), "0.000000000000000001")


if __name__ == "__main__":
    unittest.main()
