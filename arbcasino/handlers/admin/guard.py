# arbcasino/handlers/admin/guard.py
from __future__ import annotations

from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config.settings import Settings
from arbcasino.services.auth import AuthResult, AuthService


async def require_admin_or_reply(
    message: Message,
    settings: Settings,
    session: AsyncSession,
    *,
    root_only: bool = False,
) -> AuthResult | None:
    tg = message.from_user
    if not tg:
        await message.answer("⛔ You are not allowed to use admin commands.")
        return None

    auth = AuthService(settings)
    authz = await auth.resolve_by_telegram(
        session=session,
        telegram_id=tg.id,
        username=tg.username,
        first_name=tg.first_name,
        last_name=tg.last_name,
    )
    allowed = authz.is_root if root_only else authz.is_admin
    if not allowed:
        await message.answer("⛔ You are not allowed to use admin commands.")
        return None
    return authz
