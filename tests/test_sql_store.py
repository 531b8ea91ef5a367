"""
SQLite-backed store, audit log, payout queue and leaderboards.
"""

import asyncio
import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy import text

from arbcasino.config.settings import GameConfig, Settings
from arbcasino.database import Database
from arbcasino.database.repo.claims_repo import count_by_status, list_pending
from arbcasino.database.repo.leaderboard_repo import (
    LeaderCategory,
    get_top,
    get_top_since,
    get_user_rank,
)
from arbcasino.database.repo.spin_history_repo import add_spin, count_spins, recent_spins
from arbcasino.database.repo.spin_state_repo import SqlSpinStateStore, get_state
from arbcasino.database.repo.users import count_users, set_wallet, upsert_user
from arbcasino.database.types import SortableAmount
from arbcasino.game.errors import DailyLimitReached, StaleSpinState
from arbcasino.game.ledger import UserSpinState
from arbcasino.game.rewards import ALL
from arbcasino.game.store import UserLocks
from arbcasino.game.tokens import DEFAULT_TOKENS, ONE_TOKEN, TokenType
from arbcasino.game.wheel import SegmentName, WheelOutcomeGenerator
from arbcasino.services.auth import AuthService
from arbcasino.services.game import GameService, SpinReceipt
from arbcasino.services.payouts import PayoutService
from tests._support import DRAW_BONUS, DRAW_BUST, DRAW_TOKEN_A, FakeClock, FixedDraw

UTC = timezone.utc
WALLET = "0x" + "1f" * 20
TX_HASH = "0x" + "ab" * 32


class SqlTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        path = os.path.join(self._tmp.name, "arbcasino-test.db")
        self.db = Database(f"sqlite+aiosqlite:///{path}")
        await self.db.init_models()
        self.locks = UserLocks()
        self.clock = FakeClock()

    async def asyncTearDown(self):
        await self.db.close()
        self._tmp.cleanup()

    async def make_user(self, telegram_id, username=None):
        async with self.db.session() as session:
            user = await upsert_user(
                session,
                telegram_id=telegram_id,
                username=username,
                first_name=None,
                last_name=None,
            )
            await session.commit()
            return user.id

    async def seed_state(self, user_id, state):
        async with self.db.session() as session:
            store = SqlSpinStateStore(session, self.locks)
            async with store.lock(user_id):
                current = await store.load(user_id)
                state.version = current.version
                await store.save(user_id, state)

    def service(self, session, *draws):
        return GameService.for_session(
            session,
            locks=self.locks,
            config=GameConfig(),
            clock=self.clock,
            generator=WheelOutcomeGenerator(rng=FixedDraw(*(draws or (DRAW_TOKEN_A,)))),
        )


class TestSpinStateStore(SqlTestCase):

    async def test_round_trip_keeps_exact_amounts(self):
        uid = await self.make_user(100)
        state = UserSpinState(
            spins_used_today=2,
            last_spin_at=datetime(2026, 10, 19, 12, 30, tzinfo=UTC),
            total_spins=40,
            total_wins=21,
        )
        state.accumulated[TokenType.TOKEN_1] = 10**30 + 7
        state.claimed[TokenType.TOKEN_3] = 10**25
        await self.seed_state(uid, state)

        async with self.db.session() as session:
            loaded = await get_state(session, uid)

        self.assertEqual(loaded.accumulated[TokenType.TOKEN_1], 10**30 + 7)
        self.assertEqual(loaded.claimed[TokenType.TOKEN_3], 10**25)
        self.assertEqual(loaded.last_spin_at, datetime(2026, 10, 19, 12, 30, tzinfo=UTC))
        self.assertEqual((loaded.spins_used_today, loaded.total_spins, loaded.total_wins), (2, 40, 21))
        self.assertEqual(loaded.version, 1)

    async def test_missing_row_reads_as_fresh_state(self):
        uid = await self.make_user(101)
        async with self.db.session() as session:
            self.assertEqual(await get_state(session, uid), UserSpinState())

    async def test_stale_version_rejected(self):
        uid = await self.make_user(102)
        async with self.db.session() as session:
            store = SqlSpinStateStore(session, self.locks)
            first = await store.load(uid)
            second = first.copy()

            first.total_spins = 1
            await store.save(uid, first)

            second.total_spins = 5
            with self.assertRaises(StaleSpinState):
                await store.save(uid, second)
            await session.commit()

        async with self.db.session() as session:
            self.assertEqual((await get_state(session, uid)).total_spins, 1)


class TestGameServiceSql(SqlTestCase):

    async def test_three_spins_then_limit(self):
        uid = await self.make_user(200)
        for expected in (2, 1, 0):
            async with self.db.session() as session:
                receipt = await self.service(session).spin(uid)
                self.assertEqual(receipt.spins_remaining, expected)

        async with self.db.session() as session:
            with self.assertRaises(DailyLimitReached):
                await self.service(session).spin(uid)

        async with self.db.session() as session:
            state = await get_state(session, uid)
            self.assertEqual(state.total_spins, 3)
            self.assertEqual(state.accumulated[TokenType.TOKEN_1], 3 * ONE_TOKEN)

            history = await recent_spins(session, uid, limit=10)
            self.assertEqual(len(history), 3)
            self.assertTrue(all(h.segment == SegmentName.TOKEN_A for h in history))
            self.assertTrue(all(h.random_seed for h in history))
            self.assertEqual(await count_spins(session), (3, 3))

    async def test_concurrent_sessions_share_the_last_slot(self):
        uid = await self.make_user(201)
        await self.seed_state(
            uid, UserSpinState(spins_used_today=2, last_spin_at=self.clock.now(), total_spins=2)
        )

        async def spin_once():
            async with self.db.session() as session:
                return await self.service(session, DRAW_BUST).spin(uid)

        results = await asyncio.gather(spin_once(), spin_once(), return_exceptions=True)

        self.assertEqual(sum(isinstance(r, SpinReceipt) for r in results), 1)
        self.assertEqual(sum(isinstance(r, DailyLimitReached) for r in results), 1)

        async with self.db.session() as session:
            state = await get_state(session, uid)
            self.assertEqual((state.spins_used_today, state.total_spins), (3, 3))
            self.assertEqual(await count_spins(session), (1, 0))

    async def test_claim_queues_one_row_per_token(self):
        uid = await self.make_user(202, username="spinner")
        for draw in (DRAW_TOKEN_A, DRAW_BONUS):
            async with self.db.session() as session:
                await self.service(session, draw).spin(uid)

        async with self.db.session() as session:
            receipt = await self.service(session).claim(uid, ALL, recipient=WALLET)

        self.assertEqual(len(receipt.claim_ids), 2)
        self.assertEqual(
            receipt.settlement.moved(),
            {TokenType.TOKEN_1: ONE_TOKEN, TokenType.TOKEN_2: 4 * ONE_TOKEN},
        )

        async with self.db.session() as session:
            pending = await list_pending(session)
            self.assertEqual(len(pending), 2)
            by_token = {claim.token_type: claim for claim, _ in pending}
            self.assertEqual(by_token[TokenType.TOKEN_2].amount, 4 * ONE_TOKEN)
            self.assertEqual(
                by_token[TokenType.TOKEN_1].token_address,
                DEFAULT_TOKENS[TokenType.TOKEN_1].address,
            )
            self.assertTrue(all(claim.recipient == WALLET for claim, _ in pending))
            self.assertTrue(all(user.username == "spinner" for _, user in pending))

            state = await get_state(session, uid)
            self.assertFalse(state.has_pending)
            self.assertEqual(state.claimed[TokenType.TOKEN_2], 4 * ONE_TOKEN)


class TestPayouts(SqlTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.uid = await self.make_user(300)
        async with self.db.session() as session:
            await self.service(session, DRAW_TOKEN_A).spin(self.uid)
        async with self.db.session() as session:
            await self.service(session, DRAW_BONUS).spin(self.uid)
        async with self.db.session() as session:
            receipt = await self.service(session).claim(self.uid, recipient=WALLET)
        self.claim_ids = receipt.claim_ids

    async def test_paid_and_failed_transitions(self):
        first, second = self.claim_ids

        async with self.db.session() as session:
            res = await PayoutService.mark_paid(session, claim_id=first, tx_hash=TX_HASH)
            self.assertTrue(res.ok)
            self.assertEqual(res.claim.tx_hash, TX_HASH)

            again = await PayoutService.mark_paid(session, claim_id=first, tx_hash=TX_HASH)
            self.assertFalse(again.ok)

            failed = await PayoutService.mark_failed(session, claim_id=second)
            self.assertTrue(failed.ok)
            await session.commit()

        async with self.db.session() as session:
            self.assertEqual(await count_by_status(session), {"pending": 0, "paid": 1, "failed": 1})

            retried = await PayoutService.mark_paid(session, claim_id=second, tx_hash=TX_HASH)
            self.assertTrue(retried.ok)
            await session.commit()

        async with self.db.session() as session:
            self.assertEqual(await count_by_status(session), {"pending": 0, "paid": 2, "failed": 0})

    async def test_rejects_bad_hash_and_unknown_id(self):
        async with self.db.session() as session:
            bad = await PayoutService.mark_paid(session, claim_id=self.claim_ids[0], tx_hash="0x123")
            self.assertFalse(bad.ok)

            missing = await PayoutService.mark_failed(session, claim_id=9999)
            self.assertFalse(missing.ok)

            self.assertEqual((await count_by_status(session))["pending"], 2)


class TestLeaderboard(SqlTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alice = await self.make_user(401, username="alice")
        self.bob = await self.make_user(402, username="bob")
        self.carol = await self.make_user(403, username="carol")

        a = UserSpinState(total_spins=5, total_wins=3)
        a.accumulated[TokenType.TOKEN_1] = 10**21
        await self.seed_state(self.alice, a)

        b = UserSpinState(total_spins=2, total_wins=2)
        b.claimed[TokenType.TOKEN_2] = 10**22
        await self.seed_state(self.bob, b)

    async def test_all_time_categories(self):
        async with self.db.session() as session:
            wins = await get_top(session, LeaderCategory.WINS)
            self.assertEqual([(r.user_id, r.score) for r in wins], [(self.alice, 3), (self.bob, 2)])

            spins = await get_top(session, LeaderCategory.SPINS, limit=1)
            self.assertEqual([(r.user_id, r.score) for r in spins], [(self.alice, 5)])

            rewards = await get_top(session, LeaderCategory.REWARDS)
            self.assertEqual([r.user_id for r in rewards], [self.bob, self.alice])
            self.assertEqual(rewards[0].score, 10**22)

    async def test_user_rank(self):
        async with self.db.session() as session:
            self.assertEqual(await get_user_rank(session, self.alice, LeaderCategory.WINS), (1, 3))
            self.assertEqual(await get_user_rank(session, self.bob, LeaderCategory.WINS), (2, 2))
            self.assertEqual(
                await get_user_rank(session, self.bob, LeaderCategory.REWARDS), (1, 10**22)
            )
            self.assertEqual(await get_user_rank(session, self.carol), (None, 0))

    async def test_rewards_rank_numerically_across_digit_lengths(self):
        # 9e21 sorts above 1e22 as a plain decimal string
        dave = await self.make_user(404, username="dave")
        d = UserSpinState(total_spins=1, total_wins=1)
        d.accumulated[TokenType.TOKEN_1] = 4 * 10**21
        d.claimed[TokenType.TOKEN_3] = 5 * 10**21
        await self.seed_state(dave, d)

        async with self.db.session() as session:
            rewards = await get_top(session, LeaderCategory.REWARDS)
            self.assertEqual(
                [(r.user_id, r.score) for r in rewards],
                [(self.bob, 10**22), (dave, 9 * 10**21), (self.alice, 10**21)],
            )
            self.assertEqual(await get_user_rank(session, dave, LeaderCategory.REWARDS), (2, 9 * 10**21))
            self.assertEqual(
                await get_user_rank(session, self.alice, LeaderCategory.REWARDS), (3, 10**21)
            )

            raw = await session.scalar(
                text("SELECT lifetime_rewards FROM player_state WHERE user_id = :uid"),
                {"uid": dave},
            )
        self.assertEqual(len(raw), SortableAmount.width)
        self.assertEqual(int(raw), 9 * 10**21)

    async def test_weekly_window_counts_recent_wins(self):
        wheel = WheelOutcomeGenerator()
        now = datetime.now(UTC)
        async with self.db.session() as session:
            win = wheel.resolve(SegmentName.TOKEN_A, "seed")
            bust = wheel.resolve(SegmentName.BUST, "seed")

            await add_spin(session, user_id=self.alice, outcome=win, spun_at=now - timedelta(days=2))
            await add_spin(session, user_id=self.alice, outcome=win, spun_at=now - timedelta(days=10))
            await add_spin(session, user_id=self.bob, outcome=win, spun_at=now - timedelta(days=1))
            await add_spin(session, user_id=self.bob, outcome=win, spun_at=now - timedelta(hours=3))
            await add_spin(session, user_id=self.carol, outcome=bust, spun_at=now - timedelta(hours=1))
            await session.commit()

        async with self.db.session() as session:
            rows = await get_top_since(session, now - timedelta(days=7))

        self.assertEqual([(r.user_id, r.score) for r in rows], [(self.bob, 2), (self.alice, 1)])
        self.assertEqual(rows[0].username, "bob")


class TestUsersAndAdmins(SqlTestCase):

    async def test_upsert_refreshes_profile_and_wallet(self):
        uid = await self.make_user(500, username="old")
        async with self.db.session() as session:
            user = await upsert_user(
                session, telegram_id=500, username="new", first_name="N", last_name=None
            )
            self.assertEqual(user.id, uid)
            await set_wallet(session, user, WALLET)
            await session.commit()

        async with self.db.session() as session:
            user = await upsert_user(
                session, telegram_id=500, username="new", first_name="N", last_name=None
            )
            self.assertEqual(user.wallet_address, WALLET)
            self.assertEqual(await count_users(session), 1)

    async def test_roles(self):
        settings = Settings(bot_token="x", root_admin_ids=(1,))
        auth = AuthService(settings)
        async with self.db.session() as session:
            root = await auth.resolve_by_telegram(session, 1)
            self.assertTrue(root.is_root)

            plain = await auth.resolve_by_telegram(session, 2, username="two")
            self.assertEqual((plain.is_admin, plain.role), (False, "user"))

            user = await upsert_user(session, telegram_id=2, username="two", first_name=None, last_name=None)
            self.assertTrue(await auth.grant_admin(session, user))
            self.assertFalse(await auth.grant_admin(session, user))

            promoted = await auth.resolve(session, user)
            self.assertTrue(promoted.is_admin)
            self.assertFalse(promoted.is_root)
            await session.commit()


if __name__ == "__main__":
    unittest.main()
