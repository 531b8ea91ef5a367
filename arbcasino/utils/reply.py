# arbcasino/utils/reply.py
from __future__ import annotations

from aiogram.enums import ChatType, ParseMode
from aiogram.types import Message

from arbcasino.keyboards.main import main_menu_kb


async def reply_safe(message: Message, text: str, **kwargs) -> None:
    """
    HTML reply; the spin menu is attached in private chats only, so group
    members don't get a keyboard for a bot they never opened.
    """
    kwargs.setdefault("parse_mode", ParseMode.HTML)
    if message.chat.type == ChatType.PRIVATE:
        kwargs.setdefault("reply_markup", main_menu_kb())

    await message.answer(text, **kwargs)
