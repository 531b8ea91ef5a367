# arbcasino/handlers/admin/payouts.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.database.repo.claims_repo import count_by_status, list_pending
from arbcasino.handlers.admin.guard import require_admin_or_reply
from arbcasino.services.payouts import PayoutService
from arbcasino.utils.formatting import display_name, token_line

router = Router()


@router.message(Command("payouts"))
async def payouts_cmd(message: Message, settings: Settings, session: AsyncSession) -> None:
    if not await require_admin_or_reply(message, settings, session):
        return

    counts = await count_by_status(session)
    pending = await list_pending(session, limit=20)

    lines = [
        "🗂 <b>Payout queue</b>",
        f"⏳ Pending: <b>{counts['pending']}</b>  ✅ Paid: <b>{counts['paid']}</b>  ❌ Failed: <b>{counts['failed']}</b>",
        "",
    ]
    if not pending:
        lines.append("Nothing to pay out 🎉")
    for claim, user in pending:
        who = display_name(user.username, user.first_name, user.last_name)
        lines.append(
            f"#{claim.id} {who}: {token_line(claim.token_type, claim.amount, settings.game.tokens)}\n"
            f"   → <code>{claim.recipient or '—'}</code>"
        )
    if pending:
        lines += ["", "Mark with <code>/paid &lt;id&gt; &lt;txhash&gt;</code> or <code>/failed &lt;id&gt;</code>"]

    await message.answer("\n".join(lines))


def _parse_id(raw: str | None) -> int | None:
    try:
        return int((raw or "").strip().lstrip("#"))
    except ValueError:
        return None


@router.message(Command("paid"))
async def paid_cmd(message: Message, settings: Settings, session: AsyncSession, command: CommandObject) -> None:
    if not await require_admin_or_reply(message, settings, session):
        return

    parts = (command.args or "").split()
    claim_id = _parse_id(parts[0]) if parts else None
    if claim_id is None or len(parts) != 2:
        await message.answer("Usage: <code>/paid &lt;claim_id&gt; &lt;txhash&gt;</code>")
        return

    res = await PayoutService.mark_paid(session, claim_id=claim_id, tx_hash=parts[1])
    await message.answer(res.message)


@router.message(Command("failed"))
async def failed_cmd(message: Message, settings: Settings, session: AsyncSession, command: CommandObject) -> None:
    if not await require_admin_or_reply(message, settings, session):
        return

    claim_id = _parse_id(command.args)
    if claim_id is None:
        await message.answer("Usage: <code>/failed &lt;claim_id&gt;</code>")
        return

    res = await PayoutService.mark_failed(session, claim_id=claim_id)
    await message.answer(res.message)
