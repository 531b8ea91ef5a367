"""
Wheel draw: probability mass, segment walk, reward resolution.
"""

import random
import unittest
from collections import Counter
from fractions import Fraction

from arbcasino.game.tokens import ONE_TOKEN, TokenType
from arbcasino.game.wheel import (
    DEFAULT_SEGMENTS,
    RewardRule,
    SegmentName,
    WheelOutcomeGenerator,
    WheelSegment,
)
from tests._support import (
    DRAW_BONUS,
    DRAW_JACKPOT,
    DRAW_TOKEN_A,
    DRAW_TOKEN_B,
    DRAW_TOKEN_C,
    FixedDraw,
)


class TestSegmentWalk(unittest.TestCase):

    def setUp(self):
        self.wheel = WheelOutcomeGenerator()

    def test_total_weight(self):
        self.assertEqual(self.wheel.total_weight, 100)

    def test_boundaries_follow_cumulative_weights(self):
        # cumulative: 15, 40, 52, 60, 75, 95, 98, 100
        cases = {
            0: SegmentName.TOKEN_A,
            14: SegmentName.TOKEN_A,
            15: SegmentName.BUST,
            39: SegmentName.BUST,
            40: SegmentName.TOKEN_B,
            51: SegmentName.TOKEN_B,
            52: SegmentName.BONUS,
            59: SegmentName.BONUS,
            60: SegmentName.TOKEN_C,
            74: SegmentName.TOKEN_C,
            75: SegmentName.BUST,
            94: SegmentName.BUST,
            95: SegmentName.TOKEN_A,
            97: SegmentName.TOKEN_A,
            98: SegmentName.JACKPOT,
            99: SegmentName.JACKPOT,
        }
        for r, expected in cases.items():
            with self.subTest(r=r):
                self.assertEqual(self.wheel.segment_at(r), expected)

    def test_draw_outside_range_rejected(self):
        with self.assertRaises(ValueError):
            self.wheel.segment_at(100)
        with self.assertRaises(ValueError):
            self.wheel.segment_at(-1)


class TestRewardResolution(unittest.TestCase):

    def _spin(self, draw):
        return WheelOutcomeGenerator(rng=FixedDraw(draw)).spin()

    def test_plain_token_segments(self):
        a = self._spin(DRAW_TOKEN_A)
        self.assertEqual((a.token_type, a.reward_amount), (TokenType.TOKEN_1, ONE_TOKEN))

        b = self._spin(DRAW_TOKEN_B)
        self.assertEqual((b.token_type, b.reward_amount), (TokenType.TOKEN_2, 2 * ONE_TOKEN))

        c = self._spin(DRAW_TOKEN_C)
        self.assertEqual((c.token_type, c.reward_amount), (TokenType.TOKEN_3, ONE_TOKEN // 2))

    def test_bonus_doubles_token_2(self):
        out = self._spin(DRAW_BONUS)
        self.assertEqual(out.segment, SegmentName.BONUS)
        self.assertTrue(out.is_win)
        self.assertEqual(out.token_type, TokenType.TOKEN_2)
        self.assertEqual(out.reward_amount, 4_000_000_000_000_000_000)

    def test_jackpot_is_ten_times_token_1(self):
        out = self._spin(DRAW_JACKPOT)
        self.assertEqual(out.segment, SegmentName.JACKPOT)
        self.assertEqual(out.token_type, TokenType.TOKEN_1)
        self.assertEqual(out.reward_amount, 10_000_000_000_000_000_000)
        self.assertIsInstance(out.reward_amount, int)

    def test_seed_is_attached(self):
        out = self._spin(DRAW_TOKEN_A)
        self.assertTrue(out.random_seed)
        self.assertNotEqual(out.random_seed, self._spin(DRAW_TOKEN_A).random_seed)

    def test_bust_and_win_outcomes(self):
        wheel = WheelOutcomeGenerator(rng=random.Random(7))
        seen = set()
        for _ in range(5_000):
            out = wheel.spin()
            seen.add(out.segment)
            if out.segment == SegmentName.BUST:
                self.assertFalse(out.is_win)
                self.assertEqual(out.token_type, TokenType.NONE)
                self.assertEqual(out.reward_amount, 0)
            else:
                self.assertTrue(out.is_win)
                self.assertGreater(out.reward_amount, 0)
                self.assertNotEqual(out.token_type, TokenType.NONE)
        self.assertEqual(seen, set(SegmentName))


class TestProbabilityMass(unittest.TestCase):

    def test_empirical_frequencies_converge(self):
        """Each segment name lands within ±0.5pp of weight/total."""
        wheel = WheelOutcomeGenerator(rng=random.Random(20261019))
        n = 200_000
        counts = Counter(wheel.spin().segment for _ in range(n))

        for name, p in wheel.segment_probabilities().items():
            with self.subTest(segment=name.value):
                self.assertAlmostEqual(counts[name] / n, float(p), delta=0.005)

    def test_duplicate_slots_are_summed(self):
        probs = WheelOutcomeGenerator().segment_probabilities()
        self.assertEqual(probs[SegmentName.BUST], Fraction(45, 100))
        self.assertEqual(probs[SegmentName.TOKEN_A], Fraction(18, 100))
        self.assertEqual(sum(probs.values()), 1)

    def test_win_probability_and_expected_value(self):
        wheel = WheelOutcomeGenerator()
        self.assertEqual(wheel.win_probability(), Fraction(55, 100))

        ev = wheel.expected_value()
        # TOKEN_1: 18% * 1 + 2% * 10 ; TOKEN_2: 12% * 2 + 8% * 4 ; TOKEN_3: 15% * 0.5
        self.assertEqual(ev[TokenType.TOKEN_1], Fraction(38, 100) * ONE_TOKEN)
        self.assertEqual(ev[TokenType.TOKEN_2], Fraction(56, 100) * ONE_TOKEN)
        self.assertEqual(ev[TokenType.TOKEN_3], Fraction(15, 200) * ONE_TOKEN)


class TestTableValidation(unittest.TestCase):

    def test_empty_table(self):
        with self.assertRaises(ValueError):
            WheelOutcomeGenerator(segments=())

    def test_non_positive_weight(self):
        with self.assertRaises(ValueError):
            WheelOutcomeGenerator(segments=(WheelSegment(SegmentName.BUST, 0),))

    def test_missing_reward_rule(self):
        with self.assertRaises(ValueError):
            WheelOutcomeGenerator(segments=DEFAULT_SEGMENTS, rules={})

    def test_custom_table(self):
        wheel = WheelOutcomeGenerator(
            segments=(WheelSegment(SegmentName.BUST, 1), WheelSegment(SegmentName.TOKEN_C, 3)),
            rules={SegmentName.TOKEN_C: RewardRule(TokenType.TOKEN_3, 7, multiplier=3)},
            rng=FixedDraw(1),
        )
        out = wheel.spin()
        self.assertEqual(out.segment, SegmentName.TOKEN_C)
        self.assertEqual(out.reward_amount, 21)


if __name__ == "__main__":
    unittest.main()
