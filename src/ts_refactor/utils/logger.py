"""Logging configuration for the TS refactor agent.

Console output goes to stderr with colours; the optional file handler keeps
a rotating daily log in the migrated project's ``.refactor/logs``. Every
record carries the module name bound by ``get_logger``.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_LOGGER_NAME = "ts_refactor"

CONSOLE_FORMAT = (
    "<level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

# No output until setup_logging() installs handlers
logger.remove()
logger.configure(extra={"name": DEFAULT_LOGGER_NAME})

_logger_configured = False


def setup_logging(
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    *,
    console: bool = True,
    file: bool = True,
) -> None:
    """Install the console and file handlers.

    Only the first call has an effect until ``reset_logging()``.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Minimum log level, case-insensitive
        console: Log to stderr
        file: Log to ``refactor_YYYYMMDD.log`` under ``log_dir``
    """
    global _logger_configured

    if _logger_configured:
        return

    level = level.upper()

    if console:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if file:
        log_dir = log_dir or Path("./logs")
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / f"refactor_{datetime.now():%Y%m%d}.log",
            format=FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
        )

    _logger_configured = True


def reset_logging() -> None:
    """Drop all handlers so the next setup_logging() call reconfigures."""
    global _logger_configured

    logger.remove()
    _logger_configured = False


def get_logger(name: str = DEFAULT_LOGGER_NAME):
    """Logger whose records show ``name`` in place of loguru's own module lookup."""
    return logger.bind(name=name)
