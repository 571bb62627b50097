"""
Outbound message transport.

The dispatcher only needs ``send(chat_id, text)``; ``TelegramTransport``
provides it on top of python-telegram-bot and turns Telegram API failures
into ``TransportError``.
"""

import logging
from typing import Protocol

import telegram.error
from telegram import Bot

from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def send(self, chat_id: int, text: str) -> None: ...


class TelegramTransport:
    """Sends plain-text replies through the Telegram Bot API."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send(self, chat_id: int, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=chat_id, text=text)
        except telegram.error.TelegramError as e:
            raise TransportError(chat_id, f"Could not send to chat {chat_id}: {e}") from e
