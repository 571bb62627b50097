"""taskbot: a Telegram form bot that collects tasks into SQLite."""

__version__ = "0.1.0"
