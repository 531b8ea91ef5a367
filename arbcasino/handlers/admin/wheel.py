# arbcasino/handlers/admin/wheel.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.game.tokens import format_amount
from arbcasino.game.wheel import WheelOutcomeGenerator
from arbcasino.handlers.admin.guard import require_admin_or_reply

router = Router()


def odds_text(wheel: WheelOutcomeGenerator, settings: Settings) -> str:
    lines = ["🎡 <b>Wheel odds</b>", ""]
    for name, p in wheel.segment_probabilities().items():
        lines.append(f"• {name.value}: <b>{float(p) * 100:.1f}%</b>")

    lines += ["", f"🎯 Win chance: <b>{float(wheel.win_probability()) * 100:.1f}%</b>", "", "📈 <b>EV per spin</b>"]
    for token, ev in wheel.expected_value().items():
        info = settings.game.tokens[token]
        lines.append(f"• {info.symbol}: <b>{format_amount(int(ev), info.decimals)}</b>")
    return "\n".join(lines)


@router.message(Command("wheel"))
async def wheel_cmd(message: Message, settings: Settings, session: AsyncSession) -> None:
    if not await require_admin_or_reply(message, settings, session):
        return
    await message.answer(odds_text(WheelOutcomeGenerator(), settings))
