from aiogram import Router

from arbcasino.handlers.admin.admins import router as admins_router
from arbcasino.handlers.admin.payouts import router as payouts_router
from arbcasino.handlers.admin.stats import router as stats_router
from arbcasino.handlers.admin.wheel import router as wheel_router

router = Router()

router.include_router(admins_router)
router.include_router(payouts_router)
router.include_router(stats_router)
router.include_router(wheel_router)
