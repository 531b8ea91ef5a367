# arbcasino/handlers/user/router.py
from aiogram import Router

from arbcasino.handlers.user.start import router as start_router
from arbcasino.handlers.user.spin import router as spin_router
from arbcasino.handlers.user.claim import router as claim_router
from arbcasino.handlers.user.balance import router as balance_router
from arbcasino.handlers.user.wallet import router as wallet_router
from arbcasino.handlers.user.leaderboard import router as leaderboard_router

router = Router(name="user")

router.include_router(start_router)
router.include_router(spin_router)
router.include_router(claim_router)
router.include_router(balance_router)
router.include_router(wallet_router)
router.include_router(leaderboard_router)
