from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from aiogram import Bot
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from arbcasino.config.settings import Settings
from arbcasino.database.repo.leaderboard_repo import LeaderRow, get_top_since
from arbcasino.database.session import Database
from arbcasino.utils.formatting import display_name

log = logging.getLogger(__name__)

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def weekly_winners_text(rows: list[LeaderRow], start: datetime, end: datetime) -> str:
    period = f"📅 <b>Period (UTC):</b> {start:%Y-%m-%d} → {end:%Y-%m-%d}"
    if not rows:
        return f"🏆 <b>Weekly Winners</b>\n{period}\n\nℹ️ Nobody hit the wheel this week."

    lines = ["🏆 <b>Weekly Winners</b>", period, ""]
    for i, row in enumerate(rows, start=1):
        name = display_name(row.username, row.first_name, row.last_name)
        lines.append(f"{MEDALS.get(i, f'{i}.')} {name} — <b>{row.score}</b> wins")
    lines += ["", "🎡 New week, fresh spins. Good luck!"]
    return "\n".join(lines)


async def post_weekly_winners(bot: Bot, db: Database, settings: Settings) -> None:
    """Posts the top 3 winners of the last 7 days into settings.group_id."""
    if not settings.group_id:
        log.warning("Skipping winners post: GROUP_ID is not set")
        return

    end = datetime.now(timezone.utc)
    start = end - timedelta(days=7)

    async with db.session() as session:
        top3 = await get_top_since(session, start, limit=3)

    await bot.send_message(chat_id=settings.group_id, text=weekly_winners_text(top3, start, end))
    log.info("Weekly winners posted (%s rows)", len(top3))


def build_scheduler(bot: Bot, db: Database, settings: Settings) -> AsyncIOScheduler:
    """
    Creates and returns an AsyncIOScheduler with our jobs registered.
    """
    scheduler = AsyncIOScheduler(timezone="UTC")

    # Every Sunday 00:05 UTC
    scheduler.add_job(
        post_weekly_winners,
        trigger=CronTrigger(day_of_week="sun", hour=0, minute=5, timezone="UTC"),
        kwargs={"bot": bot, "db": db, "settings": settings},
        id="post_weekly_winners",
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=300,
    )

    return scheduler
