"""
Telegram bot application builder and runner.
Registers the handlers and starts polling or webhook depending on environment.

Updates from different chats are processed concurrently; the dispatcher
serialises work within a chat.
"""

import logging
import os

import telegram.error
from telegram import Update
from telegram.ext import (
    Application,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..config import settings
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


async def _error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Catch-all error handler registered with PTB Application.

    Transient errors (network, timeout, forbidden) are logged at WARNING.
    Anything else is logged at ERROR with the update context.
    """
    err = context.error

    if isinstance(err, (telegram.error.NetworkError, telegram.error.TimedOut,
                        telegram.error.Forbidden)):
        logger.warning("Telegram transient error: %s", err)
        return

    if isinstance(err, TransportError):
        logger.warning("Reply to chat %d not delivered: %s", err.chat_id, err)
        return

    chat_id = None
    update_type = type(update).__name__ if update else "unknown"
    if getattr(update, "effective_chat", None):
        chat_id = update.effective_chat.id
    logger.error(
        "Unhandled Telegram exception (update_type=%s, chat=%s): %s",
        update_type, chat_id, err, exc_info=err,
    )


class TelegramBot:
    """Owns the PTB Application.

    Handlers may be passed straight away or registered later, once objects
    that need ``application.bot`` (the outbound transport) have been built.
    """

    def __init__(self, handlers: dict | None = None) -> None:
        timeout = settings.telegram_timeout
        self.application = (
            Application.builder()
            .token(settings.telegram_bot_token)
            .concurrent_updates(True)
            .connect_timeout(timeout)
            .read_timeout(timeout)
            .write_timeout(timeout)
            .pool_timeout(timeout)
            .get_updates_connect_timeout(timeout)
            .get_updates_read_timeout(timeout)
            .get_updates_write_timeout(timeout)
            .get_updates_pool_timeout(timeout)
            .build()
        )
        if handlers is not None:
            self.register_handlers(handlers)

    def register_handlers(self, handlers: dict) -> None:
        app = self.application
        app.add_handler(
            MessageHandler(filters.UpdateType.MESSAGE, handlers["message"])
        )
        app.add_error_handler(_error_handler)

    def run(self) -> None:
        """Start the bot (blocking). Use run_polling locally, webhook in Azure."""
        if settings.azure_environment:
            webhook_url = os.environ.get("WEBHOOK_URL")
            if webhook_url:
                logger.info("Starting bot with webhook: %s", webhook_url)
                self.application.run_webhook(
                    listen="0.0.0.0",
                    port=int(os.environ.get("PORT", 8443)),
                    webhook_url=webhook_url,
                    allowed_updates=Update.ALL_TYPES,
                )
                return
        logger.info("Starting bot with polling")
        self.application.run_polling(allowed_updates=Update.ALL_TYPES)
