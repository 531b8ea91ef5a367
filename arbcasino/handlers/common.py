# arbcasino/handlers/common.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

router = Router(name="common")


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(
        "📌 Available commands:\n"
        "/spin — spin the wheel\n"
        "/balance — spins left, pending and claimed tokens\n"
        "/claim [token|all] — collect pending rewards\n"
        "/wallet [0x…] — show or set your payout wallet\n"
        "/leaderboard [wins|spins|rewards|week] — rankings\n\n"
        "You can also use the menu buttons."
    )
