"""
Telegram message handlers.

Every message, commands included, goes through the task form: ``/addtask``
is just text to the dialogue engine, so a single catch-all handler is
registered.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from telegram import Update
from telegram.ext import ContextTypes

if TYPE_CHECKING:
    from .dispatcher import ConversationDispatcher

logger = logging.getLogger(__name__)


def make_handlers(*, dispatcher: "ConversationDispatcher") -> dict:
    """
    Factory that returns the bot's handlers.

    Returns a dict of handler_name -> handler_function.
    """

    async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
        message = update.message
        chat = update.effective_chat
        if message is None or chat is None:
            return

        # None for stickers, photos, voice notes etc.
        text = message.text
        await dispatcher.handle(chat.id, text)

    return {"message": handle_message}
