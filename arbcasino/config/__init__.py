# arbcasino/config/__init__.py
from __future__ import annotations

from .settings import GameConfig, Settings

__all__ = ["GameConfig", "Settings"]
