"""
Logging configuration for taskbot.

Console output is plain text locally and one JSON object per line in Azure,
where Azure Monitor ingests stdout. Everything is also written to
``<logs_dir>/taskbot.log``, rotated at 10 MB.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_FILENAME = "taskbot.log"
_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5

# Libraries that log every HTTP round trip or SQL call at INFO/DEBUG
_QUIET_LOGGERS = ("httpx", "httpcore", "telegram", "aiosqlite")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own creation time."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _console_handler(level: int, azure_environment: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if azure_environment:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(level: int, logs_dir: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(logs_dir, _LOG_FILENAME),
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(log_level: str, logs_dir: str, azure_environment: bool) -> None:
    """Replace the root logger's handlers with console + rotating file output."""
    os.makedirs(logs_dir, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        handlers=[
            _console_handler(level, azure_environment),
            _file_handler(level, logs_dir),
        ],
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
