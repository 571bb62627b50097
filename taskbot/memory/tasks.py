"""
TaskStore: append-only persistence for completed task forms.

Rows are written once and never updated or deleted by the bot.
"""

import asyncio
import logging
import sqlite3

from ..exceptions import StorageError
from ..models import TaskRecord
from .database import DatabaseManager

logger = logging.getLogger(__name__)


class TaskStore:
    """Persistent store for task records."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db
        # Insert + commit on the shared connection must not interleave
        self._write_lock = asyncio.Lock()

    async def save(self, record: TaskRecord, chat_id: int | None = None) -> int:
        """Insert a task record. Returns the new row ID.

        Creates the schema first if the database has not been opened yet.
        Raises StorageError on any SQLite failure; the failed insert is rolled
        back so a later save never commits it.
        """
        async with self._write_lock:
            try:
                await self._ensure_open()
                async with self._db.get_connection() as conn:
                    try:
                        cursor = await conn.execute(
                            "INSERT INTO tasks (task, deadline, reminder, chat_id) VALUES (?, ?, ?, ?)",
                            (record.task, record.deadline, record.reminder, chat_id),
                        )
                        await conn.commit()
                    except sqlite3.Error:
                        await self._rollback(conn)
                        raise
                    task_id = cursor.lastrowid
            except (sqlite3.Error, OSError) as e:
                raise StorageError(f"Could not save task {record.task!r}: {e}") from e

        logger.info("Saved task %d for chat %s", task_id, chat_id)
        return task_id

    async def count(self) -> int:
        """Return the number of stored task records."""
        try:
            await self._ensure_open()
            async with self._db.get_connection() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM tasks")
                row = await cursor.fetchone()
                return row[0]
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not count tasks: {e}") from e

    async def _ensure_open(self) -> None:
        if not self._db.is_open:
            await self._db.init()

    @staticmethod
    async def _rollback(conn) -> None:
        try:
            await conn.rollback()
        except sqlite3.Error as e:
            logger.warning("Rollback after failed task insert also failed: %s", e)
