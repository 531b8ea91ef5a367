# arbcasino/handlers/user/spin.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.game.errors import ArbCasinoError
from arbcasino.game.store import UserLocks
from arbcasino.keyboards.main import BTN_SPIN
from arbcasino.services.game import GameService
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.formatting import balances_block, outcome_text
from arbcasino.utils.reply import reply_safe

router = Router()


@router.message(Command("spin"))
@router.message(F.text == BTN_SPIN)
async def spin_cmd(message: Message, session: AsyncSession, settings: Settings, locks: UserLocks) -> None:
    user = await ensure_user(session, message)
    game = GameService.for_session(session, locks=locks, config=settings.game)

    try:
        receipt = await game.spin(user.id)
    except ArbCasinoError as e:
        await reply_safe(message, e.message, parse_mode="HTML")
        return

    tokens = settings.game.tokens
    lines = [
        outcome_text(receipt.outcome, tokens),
        "",
        f"🎯 Spins left today: <b>{receipt.spins_remaining}</b>/{settings.game.daily_limit}",
        "",
        "🫙 <b>Pending rewards</b>",
        balances_block(receipt.pending, tokens),
    ]
    if any(receipt.pending.values()):
        lines += ["", "Use /claim to collect them."]

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")
