# arbcasino/handlers/admin/admins.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.database.models import User
from arbcasino.handlers.admin.guard import require_admin_or_reply
from arbcasino.services.auth import AuthService

router = Router()


@router.message(Command("addadmin"))
async def add_admin_cmd(message: Message, settings: Settings, session: AsyncSession, command: CommandObject) -> None:
    if not await require_admin_or_reply(message, settings, session, root_only=True):
        return

    try:
        telegram_id = int((command.args or "").strip())
    except ValueError:
        await message.answer("Usage: <code>/addadmin &lt;telegram_id&gt;</code>")
        return

    user = await session.scalar(select(User).where(User.telegram_id == telegram_id))
    if user is None:
        await message.answer("❌ Unknown user (they must /start the bot first).")
        return

    added = await AuthService(settings).grant_admin(session, user)
    await message.answer("✅ Admin added." if added else "ℹ️ Already an admin.")
