# arbcasino/utils/middleware.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject, Update

from arbcasino.database.repo.users import upsert_user_from_event
from arbcasino.database.session import Database
from arbcasino.game.errors import ArbCasinoError

log = logging.getLogger(__name__)


def _message_of(event: TelegramObject) -> Message | None:
    if isinstance(event, Message):
        return event
    if isinstance(event, Update):
        return event.message
    return None


class DbSessionMiddleware(BaseMiddleware):
    """
    One unit of work per update, injected as `session` (plus `db_user`).

    Game errors that escape a handler (storage outages, lost races after all
    retries) are rolled back and answered with their user-facing message
    instead of crashing the update.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        try:
            async with self.db.session() as session:
                data["session"] = session

                db_user = await upsert_user_from_event(session, event)
                if db_user is not None:
                    data["db_user"] = db_user

                return await handler(event, data)
        except ArbCasinoError as e:
            log.warning("Unhandled game error: %s", type(e).__name__)
            message = _message_of(event)
            if message is not None:
                await message.answer(e.message)
            return None
