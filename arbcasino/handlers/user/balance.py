# arbcasino/handlers/user/balance.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.database.repo.spin_history_repo import recent_spins
from arbcasino.database.repo.spin_state_repo import get_state
from arbcasino.game.ledger import SpinWindow
from arbcasino.keyboards.main import BTN_BALANCE
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.formatting import balances_block, short_address, token_line, utc_stamp
from arbcasino.utils.reply import reply_safe

router = Router()


@router.message(Command("balance"))
@router.message(F.text == BTN_BALANCE)
async def balance_cmd(message: Message, session: AsyncSession, settings: Settings) -> None:
    user = await ensure_user(session, message)
    state = await get_state(session, user.id)

    window = SpinWindow(daily_limit=settings.game.daily_limit, policy=settings.game.reset_policy)
    remaining = window.spins_remaining(state)
    tokens = settings.game.tokens

    lines = [
        "💰 <b>Your ArbCasino profile</b>",
        "",
        f"🎯 Spins left today: <b>{remaining}</b>/{settings.game.daily_limit}",
    ]
    if remaining == 0:
        lines.append(f"⏰ Next spin: <b>{utc_stamp(window.next_reset_at(state))}</b>")

    lines += [
        f"🎰 Lifetime: <b>{state.total_spins}</b> spins, <b>{state.total_wins}</b> wins",
        f"👛 Wallet: <code>{short_address(user.wallet_address)}</code>",
        "",
        "🫙 <b>Pending</b>",
        balances_block(state.accumulated, tokens),
        "",
        "✅ <b>Claimed</b>",
        balances_block(state.claimed, tokens),
    ]

    history = await recent_spins(session, user.id, limit=5)
    if history:
        lines += ["", "🕘 <b>Last spins</b>"]
        for h in history:
            result = token_line(h.token_type, h.reward_amount, tokens) if h.is_win else "bust"
            lines.append(f"• {h.segment.value}: {result}")

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")
