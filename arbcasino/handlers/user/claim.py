# arbcasino/handlers/user/claim.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.game.errors import ArbCasinoError
from arbcasino.game.rewards import ALL
from arbcasino.game.store import UserLocks
from arbcasino.keyboards.main import BTN_CLAIM
from arbcasino.services.game import GameService
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.formatting import short_address, token_line
from arbcasino.utils.reply import reply_safe

router = Router()


@router.message(Command("claim"))
@router.message(F.text == BTN_CLAIM)
async def claim_cmd(
    message: Message,
    session: AsyncSession,
    settings: Settings,
    locks: UserLocks,
    command: CommandObject | None = None,
) -> None:
    user = await ensure_user(session, message)

    if not user.wallet_address:
        await reply_safe(
            message,
            "👛 <b>No wallet set.</b>\nSet your payout address first:\n<code>/wallet 0xYourAddress</code>",
            parse_mode="HTML",
        )
        return

    selector = (command.args or "").strip() if command else ""
    game = GameService.for_session(session, locks=locks, config=settings.game)

    try:
        receipt = await game.claim(user.id, selector or ALL, recipient=user.wallet_address)
    except ArbCasinoError as e:
        await reply_safe(message, e.message, parse_mode="HTML")
        return

    tokens = settings.game.tokens
    lines = ["🎁 <b>Claim submitted!</b>", ""]
    for token, amount in receipt.settlement.moved().items():
        lines.append(f"• {token_line(token, amount, tokens)}")
    lines += [
        "",
        f"📬 To: <code>{short_address(user.wallet_address)}</code>",
        "⏳ Payout is queued and will arrive shortly.",
    ]

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")
