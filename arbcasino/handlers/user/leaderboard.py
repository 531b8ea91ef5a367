from __future__ import annotations

from datetime import datetime, timedelta, timezone

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from arbcasino.database.repo.leaderboard_repo import (
    LeaderCategory,
    LeaderRow,
    get_top,
    get_top_since,
    get_user_rank,
)
from arbcasino.game.tokens import format_amount
from arbcasino.keyboards.main import BTN_LEADERBOARD
from arbcasino.utils.ensure_user import ensure_user
from arbcasino.utils.formatting import display_name
from arbcasino.utils.reply import reply_safe

router = Router()

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}

TITLES = {
    LeaderCategory.WINS: ("🏆 <b>Top winners</b>", "wins"),
    LeaderCategory.SPINS: ("🎰 <b>Top spinners</b>", "spins"),
    LeaderCategory.REWARDS: ("💎 <b>Top earners</b>", "tokens"),
}


def _score(category: LeaderCategory | None, value: int) -> str:
    if category == LeaderCategory.REWARDS:
        return format_amount(value)
    return str(value)


def render_rows(rows: list[LeaderRow], me_id: int, category: LeaderCategory | None, unit: str) -> list[str]:
    lines: list[str] = []
    for i, row in enumerate(rows, start=1):
        medal = MEDALS.get(i, f"{i}.")
        name = display_name(row.username, row.first_name, row.last_name)
        you = " <b>(you)</b>" if row.user_id == me_id else ""
        lines.append(f"{medal} {name} — <b>{_score(category, row.score)}</b> {unit}{you}")
    return lines


@router.message(Command("leaderboard"))
@router.message(F.text == BTN_LEADERBOARD)
async def leaderboard_cmd(
    message: Message,
    session: AsyncSession,
    command: CommandObject | None = None,
) -> None:
    user = await ensure_user(session, message)
    arg = ((command.args if command else None) or "wins").strip().lower()

    # -------------------------------------------------
    # Weekly (last 7 days, by wins)
    # -------------------------------------------------
    if arg in {"week", "weekly"}:
        since = datetime.now(timezone.utc) - timedelta(days=7)
        top = await get_top_since(session, since, limit=10)
        lines = ["📅 <b>Weekly winners</b> (last 7 days)", ""]
        if not top:
            lines.append("ℹ️ No wins this week yet.")
        else:
            lines += render_rows(top, user.id, None, "wins")
        await reply_safe(message, "\n".join(lines), parse_mode="HTML")
        return

    # -------------------------------------------------
    # All-time
    # -------------------------------------------------
    try:
        category = LeaderCategory(arg)
    except ValueError:
        await reply_safe(message, "Usage: /leaderboard [wins|spins|rewards|week]")
        return

    title, unit = TITLES[category]
    top = await get_top(session, category, limit=10)

    lines = [title, ""]
    if not top:
        lines.append("ℹ️ Nobody has spun yet. Be the first!")
        await reply_safe(message, "\n".join(lines), parse_mode="HTML")
        return

    lines += render_rows(top, user.id, category, unit)

    lines.append("")
    rank, score = await get_user_rank(session, user.id, category)
    if rank is None:
        lines.append("📍 <b>Your rank:</b> unranked (spin to join!)")
    else:
        lines.append(f"📍 <b>Your rank:</b> {rank} / <b>{_score(category, score)}</b> {unit}")

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")
