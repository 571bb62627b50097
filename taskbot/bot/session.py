"""
Per-chat session management.
Holds the dialogue state of every conversation plus the asyncio locks that
serialise message processing for a single chat.
"""

import asyncio
import logging

from ..models import DialogueState, ListOptions

logger = logging.getLogger(__name__)


class SessionManager:
    """In-memory, per-chat dialogue state store for the Telegram bot.

    Chats that have never been seen start in ``ListOptions``. Each chat gets
    two locks: the state lock guards read-transition-write, the send lock keeps
    outbound replies in the order their transitions happened. Different chats
    never share a lock.
    """

    def __init__(self) -> None:
        self._states: dict[int, DialogueState] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._send_locks: dict[int, asyncio.Lock] = {}

    def get_lock(self, chat_id: int) -> asyncio.Lock:
        if chat_id not in self._locks:
            self._locks[chat_id] = asyncio.Lock()
        return self._locks[chat_id]

    def get_send_lock(self, chat_id: int) -> asyncio.Lock:
        if chat_id not in self._send_locks:
            self._send_locks[chat_id] = asyncio.Lock()
        return self._send_locks[chat_id]

    def get_or_default(self, chat_id: int) -> DialogueState:
        """Return the chat's current state, ``ListOptions`` if it has none yet."""
        state = self._states.get(chat_id)
        if state is None:
            state = ListOptions()
            self._states[chat_id] = state
            logger.debug("New conversation for chat %d", chat_id)
        return state

    def set(self, chat_id: int, state: DialogueState) -> None:
        self._states[chat_id] = state

    def reset(self, chat_id: int) -> None:
        """Put the chat back at the start of the menu."""
        self.set(chat_id, ListOptions())

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._states

    def __len__(self) -> int:
        return len(self._states)
