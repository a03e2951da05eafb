import logging
import sys
import asyncio
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from promptengine.config import settings
from promptengine.handlers import get_routers
from promptengine.services.gemini import GeminiPromptService
from promptengine.utils.logging_config import configure_logging

# Root logger: every module logger propagates here
configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

# Flush stdout immediately (important for Docker)
sys.stdout.reconfigure(line_buffering=True)


async def main():
    """Main entry point"""
    try:
        logger.info("="*60)
        logger.info("Starting PromptEngine Bot...")
        logger.info(f"Log level: {settings.LOG_LEVEL}")
        logger.info(f"Prompt model: {settings.PROMPT_MODEL}")
        logger.info("="*60)

        if not settings.BOT_TOKEN:
            raise RuntimeError("BOT_TOKEN is not set")

        if settings.is_gemini_configured:
            if await GeminiPromptService().test_connection():
                logger.info("✓ Gemini API reachable")
            else:
                logger.warning("Gemini API not reachable, blueprints will use the fallback engine until it recovers")
        else:
            logger.warning("GEMINI_API_KEY is not set, all blueprints will come from the fallback engine")

        logger.info("Initializing bot and dispatcher...")
        bot = Bot(
            token=settings.BOT_TOKEN,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML)
        )
        dp = Dispatcher(storage=MemoryStorage())
        logger.info("✓ Bot and dispatcher initialized")

        routers = get_routers()
        dp.include_routers(*routers)
        logger.info(f"✓ {len(routers)} routers included")

        await bot.delete_webhook(drop_pending_updates=True)

        bot_info = await bot.get_me()
        logger.info(f"Bot info: @{bot_info.username} (ID: {bot_info.id})")

        logger.info("="*60)
        logger.info("🚀 Bot is now running and polling for updates...")
        logger.info("="*60)

        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types()
        )

    except Exception as e:
        logger.critical(f"Fatal error during bot startup: {e}", exc_info=True)
        raise


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.critical(f"Unhandled exception: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
