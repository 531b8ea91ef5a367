from __future__ import annotations

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.formatting import display_name
from arbcasino.utils.reply import reply_safe

router = Router()


@router.message(CommandStart())
async def start_cmd(message: Message, session: AsyncSession, settings: Settings) -> None:
    me = await ensure_user(session, message)
    symbols = ", ".join(t.symbol for t in settings.game.tokens.values())

    await reply_safe(
        message,
        f"🎡 <b>Welcome to ArbCasino, {display_name(me.username, me.first_name, me.last_name)}!</b>\n\n"
        f"Spin the wheel up to <b>{settings.game.daily_limit}</b> times a day (UTC) "
        f"and win Arbitrum test tokens: {symbols}.\n\n"
        "1️⃣ Set your wallet: <code>/wallet 0x…</code>\n"
        "2️⃣ Spin: /spin\n"
        "3️⃣ Collect: /claim\n\n"
        "Use the menu buttons below 👇",
        parse_mode="HTML",
    )
