import asyncio
import logging
import traceback
from aiogram import Bot, Dispatcher
from .config import load_settings
from .handlers import register_handlers

logger = logging.getLogger(__name__)

async def _notify_admins(bot: Bot, admin_ids: list[int], message: str) -> None:
    chunk_size = 4000
    chunks = [message[i : i + chunk_size] for i in range(0, len(message), chunk_size)] or [message]
    for admin_id in admin_ids:
        for chunk in chunks:
            await bot.send_message(admin_id, chunk, parse_mode=None)

async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    # replies carry their own entities; nothing relies on a default parse mode
    bot = Bot(settings.bot_token)
    store = None
    try:
        dp = Dispatcher()
        store = register_handlers(dp, settings=settings)
        logger.info(
            "bot_started: model=%s tts_model=%s voice_replies=%s admins=%s",
            settings.llm.llm_model,
            settings.llm.tts_model,
            settings.voice_replies,
            len(settings.admin_ids),
        )
        await dp.start_polling(bot)
    except Exception:
        error_text = traceback.format_exc()
        logger.exception("bot_run_failed")
        if settings.admin_ids:
            try:
                await _notify_admins(
                    bot,
                    settings.admin_ids,
                    f"Career bot crashed:\n\n{error_text}",
                )
            except Exception:
                logger.exception("failed_to_notify_admins")
        raise
    finally:
        logger.info("bot_stopped: live_conversations=%s", len(store) if store is not None else 0)
        await bot.session.close()

def cli() -> None:
    asyncio.run(main())

if __name__ == "__main__":
    cli()
