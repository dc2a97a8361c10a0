"""Logging configuration for er2sql."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO
from .settings import get_settings

LOGGER_NAME = "er2sql"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the ``er2sql`` logger.

    Console output is short and goes to stderr by default, leaving stdout to
    the SQL written by ``er2sql compile``. The optional file handler keeps
    timestamps and source locations.

    Args:
        level: Logging level name; defaults to ``Settings.log_level``
        log_file: Optional file path; defaults to ``Settings.log_file``
        stream: Console stream override

    Raises:
        ValueError: If the level name is not a logging level
    """
    settings = get_settings()
    log_level = _parse_level(level or settings.log_level)
    log_file_path = log_file or settings.log_file

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger under the ``er2sql`` hierarchy
    """
    if not logging.getLogger(LOGGER_NAME).handlers:
        setup_logging()

    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
