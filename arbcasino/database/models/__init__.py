from .user import User
from .admin import Admin, AdminRole
from .player_state import PlayerState
from .spin import SpinHistory
from .claim import ClaimStatus, TokenClaim

__all__ = [
    "User",
    "Admin",
    "AdminRole",
    "PlayerState",
    "SpinHistory",
    "ClaimStatus",
    "TokenClaim",
]
