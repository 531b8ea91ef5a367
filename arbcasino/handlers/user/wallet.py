# arbcasino/handlers/user/wallet.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.repo.users import set_wallet
from arbcasino.services.payouts import is_wallet_address
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.reply import reply_safe

router = Router()


@router.message(Command("wallet"))
async def wallet_cmd(message: Message, session: AsyncSession, command: CommandObject) -> None:
    user = await ensure_user(session, message)
    arg = (command.args or "").strip()

    if not arg:
        current = user.wallet_address or "not set"
        await reply_safe(
            message,
            f"👛 <b>Payout wallet:</b> <code>{current}</code>\n\nChange it with <code>/wallet 0x…</code>",
            parse_mode="HTML",
        )
        return

    if not is_wallet_address(arg):
        await reply_safe(message, "❌ That is not a valid address (0x + 40 hex chars).")
        return

    await set_wallet(session, user, arg)
    await reply_safe(message, f"✅ Wallet saved: <code>{arg}</code>", parse_mode="HTML")
