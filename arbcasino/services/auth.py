# arbcasino/services/auth.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.config import Settings
from arbcasino.database.models import Admin, AdminRole, User
from arbcasino.database.repo.users import upsert_user


@dataclass(frozen=True, slots=True)
class AuthResult:
    is_root: bool
    is_admin: bool
    role: str  # "root" | "admin" | "user"


ROOT = AuthResult(is_root=True, is_admin=True, role=AdminRole.ROOT.value)
PLAYER = AuthResult(is_root=False, is_admin=False, role="user")


class AuthService:
    """
    Who may run the payout/admin commands.

    Root admins are listed in ROOT_ADMIN_IDS and can grant the admin role;
    admins live in the `admins` table; everybody else is a player.
    """

    def __init__(self, settings: Settings) -> None:
        self.root_ids = frozenset(settings.root_admin_ids)

    def is_root(self, telegram_id: int) -> bool:
        return telegram_id in self.root_ids

    async def resolve(self, session: AsyncSession, user: User) -> AuthResult:
        if self.is_root(user.telegram_id):
            return ROOT

        role = await session.scalar(select(Admin.role).where(Admin.user_id == user.id))
        if role is None:
            return PLAYER
        return AuthResult(is_root=False, is_admin=True, role=role.value)

    async def resolve_by_telegram(
        self,
        session: AsyncSession,
        telegram_id: int,
        username: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthResult:
        if self.is_root(telegram_id):
            return ROOT

        user = await upsert_user(
            session,
            telegram_id=telegram_id,
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        return await self.resolve(session, user)

    async def grant_admin(self, session: AsyncSession, user: User) -> bool:
        """False when the user already holds a role."""
        if await session.scalar(select(Admin.id).where(Admin.user_id == user.id)) is not None:
            return False
        session.add(Admin(user_id=user.id, role=AdminRole.ADMIN))
        await session.flush()
        return True
