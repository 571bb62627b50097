"""
Conversation dispatcher.

Glues one inbound message to the dialogue engine: look up the chat's state,
run the transition, store the new state, send the replies, and persist the
task record when the form completes.

Ordering per chat: the state write happens under the chat's state lock, and
the chat's send lock is taken before that lock is released. The next message
for the same chat can therefore be transitioned while earlier replies are
still in flight, but its replies queue behind them.
"""

import logging

from ..constants import TASK_SAVE_FAILED, TASK_SAVED
from ..dialogue import TransitionResult, transition
from ..exceptions import StorageError
from ..memory.tasks import TaskStore
from .session import SessionManager
from .transport import Transport

logger = logging.getLogger(__name__)


class ConversationDispatcher:
    def __init__(
        self,
        sessions: SessionManager,
        tasks: TaskStore,
        transport: Transport,
    ) -> None:
        self._sessions = sessions
        self._tasks = tasks
        self._transport = transport

    async def handle(self, chat_id: int, text: str | None) -> TransitionResult:
        """Process one inbound message for *chat_id*.

        Raises TransportError if a reply cannot be sent. The state transition
        has been committed by then and is not rolled back.
        """
        async with self._sessions.get_lock(chat_id):
            state = self._sessions.get_or_default(chat_id)
            result = transition(state, text)
            self._sessions.set(chat_id, result.next_state)
            logger.debug(
                "Chat %d: %s -> %s", chat_id, state.kind, result.next_state.kind
            )
            send_lock = self._sessions.get_send_lock(chat_id)
            await send_lock.acquire()

        try:
            for line in result.outbound:
                await self._transport.send(chat_id, line)
            if result.record is not None:
                await self._persist(chat_id, result)
        finally:
            send_lock.release()
        return result

    async def _persist(self, chat_id: int, result: TransitionResult) -> None:
        try:
            await self._tasks.save(result.record, chat_id=chat_id)
        except StorageError as e:
            logger.error("Error saving task to database for chat %d: %s", chat_id, e)
            await self._transport.send(chat_id, TASK_SAVE_FAILED)
            return
        await self._transport.send(chat_id, TASK_SAVED)
