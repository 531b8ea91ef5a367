# arbcasino/main.py
import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from arbcasino.config import Settings
from arbcasino.database import Database
from arbcasino.game.store import UserLocks
from arbcasino.handlers import router as handlers_router
from arbcasino.scheduler import setup_scheduler
from arbcasino.utils.middleware import DbSessionMiddleware

log = logging.getLogger("arbcasino")

# third-party loggers kept at WARNING (query, pool and job chatter)
QUIET_LOGGERS = ("sqlalchemy", "aiosqlite", "apscheduler", "aiogram.event")


def setup_logging(is_dev: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if is_dev else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_dispatcher(settings: Settings, db: Database) -> Dispatcher:
    """
    Handlers receive `settings`, `db` and the shared per-user `locks`
    registry from workflow data, and `session` from the middleware.
    """
    dp = Dispatcher()
    dp.workflow_data.update(settings=settings, db=db, locks=UserLocks())
    dp.update.middleware(DbSessionMiddleware(db))
    dp.include_router(handlers_router)
    return dp


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)

    db = Database(settings.database_url)
    await db.init_models()

    game = settings.game
    log.info(
        "ArbCasino starting: daily_limit=%s reset=%s tokens=%s",
        game.daily_limit,
        game.reset_policy.value,
        ", ".join(f"{t.symbol}@{t.address}" for t in game.tokens.values()),
    )

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = build_dispatcher(settings, db)
    scheduler = setup_scheduler(bot=bot, db=db, settings=settings)

    try:
        await dp.start_polling(bot)
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    except Exception:
        log.exception("Bot crashed")
        raise
    finally:
        try:
            scheduler.shutdown(wait=False)
        except Exception:
            log.exception("Failed to shutdown scheduler")

        for name, closer in (("DB", db.close), ("bot session", bot.session.close)):
            try:
                await closer()
            except Exception:
                log.exception("Failed to close %s", name)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
