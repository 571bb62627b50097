"""Tests for taskbot/bot/dispatcher.py"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskbot.bot.dispatcher import ConversationDispatcher
from taskbot.bot.session import SessionManager
from taskbot.constants import (
    ADD_TASK_LINES,
    INVALID_OPTION,
    MENU_LINES,
    TASK_RECEIVED,
    TASK_SAVE_FAILED,
    TASK_SAVED,
    TEXT_REQUIRED,
)
from taskbot.exceptions import StorageError, TransportError
from taskbot.models import (
    AddTask,
    AllTasks,
    ChoseOption,
    ListOptions,
    ReceiveTask,
    ReceiveTaskReminder,
    TaskRecord,
    TodaysTasks,
)

FORM = ["hi", "/addtask", "name", "tomorrow", "9am", "done"]


@pytest.fixture
def sessions():
    return SessionManager()


@pytest.fixture
def dispatcher(sessions, task_store, transport):
    return ConversationDispatcher(sessions, task_store, transport)


@pytest.mark.asyncio
async def test_first_message_shows_menu(dispatcher, sessions, transport):
    await dispatcher.handle(1, "hello")
    assert transport.texts(1) == list(MENU_LINES)
    assert sessions.get_or_default(1) == ChoseOption(option="hello")


@pytest.mark.asyncio
async def test_full_form_persists_one_record(dispatcher, sessions, transport, task_store, db):
    for text in FORM:
        await dispatcher.handle(7, text)

    assert sessions.get_or_default(7) == ListOptions()
    assert await task_store.count() == 1
    async with db.get_connection() as conn:
        rows = await conn.execute_fetchall("SELECT task, deadline, reminder FROM tasks")
    assert (rows[0]["task"], rows[0]["deadline"], rows[0]["reminder"]) == ("name", "tomorrow", "9am")
    assert transport.texts(7)[-2:] == [TASK_RECEIVED, TASK_SAVED]


@pytest.mark.asyncio
async def test_missing_text_never_moves_state(dispatcher, sessions, transport):
    sessions.set(3, ReceiveTask(task="x"))
    await dispatcher.handle(3, None)
    assert sessions.get_or_default(3) == ReceiveTask(task="x")
    assert transport.texts(3) == [TEXT_REQUIRED]


@pytest.mark.asyncio
async def test_bogus_command_keeps_chose_option(dispatcher, sessions, transport):
    sessions.set(3, ChoseOption(option="hi"))
    await dispatcher.handle(3, "/bogus")
    assert sessions.get_or_default(3) == ChoseOption(option="hi")
    assert transport.texts(3) == [INVALID_OPTION]


@pytest.mark.asyncio
@pytest.mark.parametrize("state", [AllTasks(), TodaysTasks()])
@pytest.mark.parametrize("text", ["x", None])
async def test_informational_states_never_touch_store(sessions, transport, state, text):
    tasks = MagicMock()
    tasks.save = AsyncMock()
    tasks.count = AsyncMock()
    dispatcher = ConversationDispatcher(sessions, tasks, transport)
    sessions.set(5, state)

    await dispatcher.handle(5, text)

    assert sessions.get_or_default(5) == ListOptions()
    tasks.save.assert_not_called()
    tasks.count.assert_not_called()


@pytest.mark.asyncio
async def test_persistence_failure_still_resets(sessions, transport):
    tasks = MagicMock()
    tasks.save = AsyncMock(side_effect=StorageError("disk full"))
    dispatcher = ConversationDispatcher(sessions, tasks, transport)
    sessions.set(9, ReceiveTaskReminder(task="t", deadline="d", reminder="r"))

    await dispatcher.handle(9, "ok")

    assert sessions.get_or_default(9) == ListOptions()
    assert transport.texts(9) == [TASK_RECEIVED, TASK_SAVE_FAILED]
    tasks.save.assert_awaited_once_with(
        TaskRecord(task="t", deadline="d", reminder="r"), chat_id=9
    )


@pytest.mark.asyncio
async def test_persistence_failure_is_logged(sessions, transport, caplog):
    tasks = MagicMock()
    tasks.save = AsyncMock(side_effect=StorageError("disk full"))
    dispatcher = ConversationDispatcher(sessions, tasks, transport)
    sessions.set(9, ReceiveTaskReminder(task="t", deadline="d", reminder="r"))

    with caplog.at_level("ERROR", logger="taskbot.bot.dispatcher"):
        await dispatcher.handle(9, "ok")

    assert "disk full" in caplog.text


@pytest.mark.asyncio
async def test_transport_error_propagates_after_state_commit(sessions, task_store):
    transport = MagicMock()
    transport.send = AsyncMock(side_effect=TransportError(4, "boom"))
    dispatcher = ConversationDispatcher(sessions, task_store, transport)

    with pytest.raises(TransportError):
        await dispatcher.handle(4, "hello")

    assert sessions.get_or_default(4) == ChoseOption(option="hello")
    # Locks are released so the chat keeps working
    assert not sessions.get_lock(4).locked()
    assert not sessions.get_send_lock(4).locked()


@pytest.mark.asyncio
async def test_concurrent_chats_are_isolated(dispatcher, sessions, transport, task_store):
    async def run_form(chat_id, name):
        for text in ["hi", "/addtask", name, f"{name}-deadline", f"{name}-reminder", "done"]:
            await dispatcher.handle(chat_id, text)
            await asyncio.sleep(0)

    await asyncio.gather(run_form(1, "alpha"), run_form(2, "beta"))

    assert sessions.get_or_default(1) == ListOptions()
    assert sessions.get_or_default(2) == ListOptions()
    assert await task_store.count() == 2
    assert transport.texts(1) == transport.texts(2)


@pytest.mark.asyncio
async def test_same_chat_messages_apply_in_order(sessions, task_store):
    class SlowTransport:
        def __init__(self):
            self.sent = []

        async def send(self, chat_id, text):
            await asyncio.sleep(0.001)
            self.sent.append(text)

    transport = SlowTransport()
    dispatcher = ConversationDispatcher(sessions, task_store, transport)

    # Submitted back to back; each must see the previous one's state
    await asyncio.gather(*(dispatcher.handle(1, text) for text in FORM))

    assert sessions.get_or_default(1) == ListOptions()
    assert await task_store.count() == 1
    assert transport.sent[:4] == list(MENU_LINES)
    assert transport.sent[-2:] == [TASK_RECEIVED, TASK_SAVED]


@pytest.mark.asyncio
async def test_replies_keep_transition_order(sessions, task_store):
    """A later message may transition while earlier replies are in flight,
    but its replies must not overtake them."""
    release = asyncio.Event()
    sent = []

    class GatedTransport:
        async def send(self, chat_id, text):
            if text == MENU_LINES[0]:
                await release.wait()
            sent.append(text)

    dispatcher = ConversationDispatcher(sessions, task_store, GatedTransport())
    first = asyncio.create_task(dispatcher.handle(1, "hi"))
    await asyncio.sleep(0)
    second = asyncio.create_task(dispatcher.handle(1, "/addtask"))
    for _ in range(5):
        await asyncio.sleep(0)

    # Second transition is already applied even though replies are held up
    assert sessions.get_or_default(1) == AddTask()
    assert sent == []

    third = asyncio.create_task(dispatcher.handle(1, "buy milk"))
    release.set()
    await asyncio.gather(first, second, third)
    assert sent == list(MENU_LINES) + list(ADD_TASK_LINES)
    assert sessions.get_or_default(1) == ReceiveTask(task="buy milk")


@pytest.mark.asyncio
async def test_empty_task_name_does_not_stall_chat(dispatcher, sessions, transport, task_store):
    sessions.set(11, AddTask())

    await dispatcher.handle(11, "")
    assert sessions.get_or_default(11) == AddTask()
    assert transport.texts(11) == [TEXT_REQUIRED]

    for text in ["name", "tomorrow", "9am", "done"]:
        await dispatcher.handle(11, text)

    assert sessions.get_or_default(11) == ListOptions()
    assert await task_store.count() == 1
