"""Custom exception hierarchy for taskbot."""


class TaskBotError(Exception):
    """Base exception for taskbot."""
    pass


class StorageError(TaskBotError):
    """Raised when a task record cannot be written to SQLite."""
    pass


class TransportError(TaskBotError):
    """Raised when an outbound message cannot be delivered to a chat."""

    def __init__(self, chat_id: int, message: str) -> None:
        super().__init__(message)
        self.chat_id = chat_id
