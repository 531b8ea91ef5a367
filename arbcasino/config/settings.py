# arbcasino/config/settings.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from arbcasino.game.ledger import DEFAULT_DAILY_LIMIT, ResetPolicy
from arbcasino.game.tokens import DEFAULT_TOKENS, TokenInfo, TokenType

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _require(env: Mapping[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _parse_int_list(raw: str | None, key_name: str) -> list[int]:
    """
    Parses comma/space/newline separated ints.
    Accepts:
      "951258732"
      "951258732,123"
      "951258732 123"
      "[951258732, 123]"  (brackets ignored)
    """
    if not raw:
        return []

    cleaned = raw.strip().strip("[](){}").strip()
    if not cleaned:
        return []

    out: list[int] = []
    for p in re.split(r"[,\s]+", cleaned):
        p2 = p.strip().strip("'\"")
        if not p2:
            continue
        out.append(_to_int(p2, key_name))
    return out


def _parse_policy(raw: str | None) -> ResetPolicy:
    value = (raw or ResetPolicy.CALENDAR_DAY.value).strip().lower()
    try:
        return ResetPolicy(value)
    except ValueError as e:
        allowed = ", ".join(p.value for p in ResetPolicy)
        raise RuntimeError(f"Invalid SPIN_RESET_POLICY: {raw!r} (expected one of: {allowed})") from e


def _parse_tokens(env: Mapping[str, str]) -> dict[TokenType, TokenInfo]:
    out: dict[TokenType, TokenInfo] = {}
    for n, (token, default) in enumerate(DEFAULT_TOKENS.items(), start=1):
        address = (env.get(f"TOKEN_{n}_ADDRESS") or default.address).strip()
        if not _ADDRESS_RE.match(address):
            raise RuntimeError(f"Invalid TOKEN_{n}_ADDRESS: {address!r}")
        symbol = (env.get(f"TOKEN_{n}_SYMBOL") or default.symbol).strip() or default.symbol
        out[token] = TokenInfo(symbol=symbol, address=address, decimals=default.decimals)
    return out


@dataclass(frozen=True, slots=True)
class GameConfig:
    daily_limit: int = DEFAULT_DAILY_LIMIT
    reset_policy: ResetPolicy = ResetPolicy.CALENDAR_DAY
    tokens: dict[TokenType, TokenInfo] = field(default_factory=lambda: dict(DEFAULT_TOKENS))


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = "sqlite+aiosqlite:///./arbcasino.db"

    # --- security / admin ---
    root_admin_ids: tuple[int, ...] = ()

    # --- telegram targets ---
    group_id: Optional[int] = None

    # --- game ---
    game: GameConfig = field(default_factory=GameConfig)

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        bot_token = _require(env, "BOT_TOKEN")

        database_url = (env.get("DATABASE_URL") or "sqlite+aiosqlite:///./arbcasino.db").strip()

        root_admin_ids = tuple(_parse_int_list(env.get("ROOT_ADMIN_IDS"), "ROOT_ADMIN_IDS"))

        group_id_raw = (env.get("GROUP_ID") or "").strip()
        group_id = _to_int(group_id_raw, "GROUP_ID") if group_id_raw else None

        limit_raw = (env.get("DAILY_SPIN_LIMIT") or "").strip()
        daily_limit = _to_int(limit_raw, "DAILY_SPIN_LIMIT") if limit_raw else DEFAULT_DAILY_LIMIT
        if daily_limit <= 0:
            raise RuntimeError(f"DAILY_SPIN_LIMIT must be positive: {daily_limit}")

        game = GameConfig(
            daily_limit=daily_limit,
            reset_policy=_parse_policy(env.get("SPIN_RESET_POLICY")),
            tokens=_parse_tokens(env),
        )

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            root_admin_ids=root_admin_ids,
            group_id=group_id,
            game=game,
            environment=environment,
        )
