"""
taskbot entry point.
Initialises all components and starts the Telegram bot.
"""

import logging
import os

from .bot.dispatcher import ConversationDispatcher
from .bot.handlers import make_handlers
from .bot.session import SessionManager
from .bot.telegram_bot import TelegramBot
from .bot.transport import TelegramTransport
from .config import settings
from .logging_config import setup_logging
from .memory.database import DatabaseManager
from .memory.tasks import TaskStore

logger = logging.getLogger(__name__)


def main() -> None:
    os.makedirs(settings.data_dir, exist_ok=True)
    os.makedirs(settings.logs_dir, exist_ok=True)

    setup_logging(settings.log_level, settings.logs_dir, settings.azure_environment)

    logger.info(
        "Starting taskbot (env=%s, data_dir=%s)",
        "azure" if settings.azure_environment else "local",
        settings.data_dir,
    )

    db = DatabaseManager()
    task_store = TaskStore(db)
    session_manager = SessionManager()

    # The transport needs the live PTB bot, so handlers are registered after build
    bot = TelegramBot()
    dispatcher = ConversationDispatcher(
        sessions=session_manager,
        tasks=task_store,
        transport=TelegramTransport(bot.application.bot),
    )
    bot.register_handlers(make_handlers(dispatcher=dispatcher))

    async def _on_post_init(app):
        await db.init()
        logger.info("Database initialised")

    async def _on_post_shutdown(app):
        logger.info("Shutting down (%d conversations in memory)", len(session_manager))
        await db.close()

    bot.application.post_init = _on_post_init
    bot.application.post_shutdown = _on_post_shutdown

    logger.info("taskbot ready")
    bot.run()


if __name__ == "__main__":
    main()
