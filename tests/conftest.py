"""Shared fixtures for taskbot tests."""

import pytest
import pytest_asyncio

from taskbot.memory.database import DatabaseManager
from taskbot.memory.tasks import TaskStore


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Prevent tests from reading real .env or touching real data."""
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "test_token")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("AZURE_ENVIRONMENT", "false")

    import taskbot.config
    monkeypatch.setattr(taskbot.config, "_settings", None)


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh database per test (temp file)."""
    manager = DatabaseManager(db_path=str(tmp_path / "test.db"))
    await manager.init()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def task_store(db):
    return TaskStore(db)


class FakeTransport:
    """Records every outbound message as (chat_id, text)."""

    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    async def send(self, chat_id: int, text: str) -> None:
        self.sent.append((chat_id, text))

    def texts(self, chat_id: int) -> list[str]:
        return [t for c, t in self.sent if c == chat_id]


@pytest.fixture
def transport():
    return FakeTransport()
