# arbcasino/scheduler/__init__.py
from __future__ import annotations

from aiogram import Bot
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from arbcasino.config.settings import Settings
from arbcasino.database.session import Database
from arbcasino.scheduler.jobs import build_scheduler


def setup_scheduler(bot: Bot, db: Database, settings: Settings) -> AsyncIOScheduler:
    scheduler = build_scheduler(bot=bot, db=db, settings=settings)
    scheduler.start()
    return scheduler
