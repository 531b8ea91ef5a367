"""
Per-update unit of work: user upsert, commit, and game-error replies.
"""

import os
import tempfile
import unittest
from datetime import datetime, timezone

from aiogram.types import Chat, Message, Update
from aiogram.types import User as TgUser

from arbcasino.database import Database
from arbcasino.database.repo.users import count_users
from arbcasino.game.errors import NoPendingRewards
from arbcasino.utils.middleware import DbSessionMiddleware

SENT: list[str] = []


class RecordingMessage(Message):
    async def answer(self, text, **kwargs):
        SENT.append(text)


def make_update(text="/claim"):
    message = RecordingMessage(
        message_id=1,
        date=datetime.now(timezone.utc),
        chat=Chat(id=777, type="private"),
        from_user=TgUser(id=777, is_bot=False, first_name="Ann", username="ann"),
        text=text,
    )
    return Update(update_id=1, message=message)


class TestDbSessionMiddleware(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        SENT.clear()
        self._tmp = tempfile.TemporaryDirectory()
        path = os.path.join(self._tmp.name, "arbcasino-mw.db")
        self.db = Database(f"sqlite+aiosqlite:///{path}")
        await self.db.init_models()
        self.middleware = DbSessionMiddleware(self.db)

    async def asyncTearDown(self):
        await self.db.close()
        self._tmp.cleanup()

    async def users_in_db(self):
        async with self.db.session() as session:
            return await count_users(session)

    async def test_game_error_is_answered_and_rolled_back(self):
        async def handler(event, data):
            self.assertIn("session", data)
            self.assertEqual(data["db_user"].telegram_id, 777)
            raise NoPendingRewards()

        result = await self.middleware(handler, make_update(), {})

        self.assertIsNone(result)
        self.assertEqual(SENT, [NoPendingRewards().message])
        self.assertEqual(await self.users_in_db(), 0)

    async def test_clean_return_commits_the_upsert(self):
        async def handler(event, data):
            return "ok"

        result = await self.middleware(handler, make_update(), {})

        self.assertEqual(result, "ok")
        self.assertEqual(SENT, [])
        self.assertEqual(await self.users_in_db(), 1)

    async def test_other_errors_propagate_uncommitted(self):
        async def handler(event, data):
            raise RuntimeError("handler bug")

        with self.assertRaises(RuntimeError):
            await self.middleware(handler, make_update(), {})

        self.assertEqual(SENT, [])
        self.assertEqual(await self.users_in_db(), 0)


if __name__ == "__main__":
    unittest.main()
