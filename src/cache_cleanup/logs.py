"""Logging setup: Rich on the terminal, timestamped lines in the log file."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "cache-cleanup"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVEL_ALIASES = {"WARNING": "WARN", "CRITICAL": "ERROR"}

FILE_ONLY = {"console": False}


class LogFileFormatter(logging.Formatter):
    """Formats ``[YYYY-MM-DD HH:MM:SS] LEVEL: message`` lines."""

    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = LEVEL_ALIASES.get(original, original)
        try:
            return super().format(record)
        finally:
            record.levelname = original


class ConsoleFilter(logging.Filter):
    """Drops records tagged ``console=False`` (already shown through Rich)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "console", True)


def setup_logging(
    log_file: Path | None = None,
    level: str = "INFO",
    console: Console | None = None,
) -> logging.Logger:
    """Set up logging for a cleanup run.

    Args:
        log_file: Append-only log file, or None for terminal only.
        level: Minimum level name.
        console: Rich console for terminal output.

    Returns:
        Configured logger instance.

    Raises:
        OSError: If the log file cannot be opened for appending.

    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level))

    # Clear existing handlers to avoid duplicates across runs
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(),
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.addFilter(ConsoleFilter())
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(LogFileFormatter())
        logger.addHandler(file_handler)

    return logger
