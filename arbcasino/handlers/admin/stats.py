# arbcasino/handlers/admin/stats.py
from __future__ import annotations

from datetime import datetime, time, timezone

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.database.repo.claims_repo import count_by_status
from arbcasino.database.repo.spin_history_repo import count_spins
from arbcasino.database.repo.users import count_users
from arbcasino.handlers.admin.guard import require_admin_or_reply

router = Router()


@router.message(Command("stats"))
async def stats_cmd(message: Message, settings: Settings, session: AsyncSession) -> None:
    if not await require_admin_or_reply(message, settings, session):
        return

    today_start = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)

    players = await count_users(session)
    spins, wins = await count_spins(session)
    spins_today, wins_today = await count_spins(session, since=today_start)
    claims = await count_by_status(session)

    await message.answer(
        "📊 <b>ArbCasino stats</b>\n\n"
        f"👥 Players: <b>{players}</b>\n"
        f"🎰 Spins: <b>{spins}</b> (today {spins_today})\n"
        f"🎉 Wins: <b>{wins}</b> (today {wins_today})\n"
        f"⏳ Pending payouts: <b>{claims['pending']}</b>\n"
        f"❌ Failed payouts: <b>{claims['failed']}</b>"
    )
