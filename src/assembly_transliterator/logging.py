"""
Logging setup for assembly-transliterator.

Console output goes through rich; an optional rotating file sink mirrors it.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from assembly_transliterator.config import LoggingConfig

_LOGGER_NAME = "assembly_transliterator"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the assembly_transliterator hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    config: LoggingConfig | None = None,
    *,
    verbose: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Logging section of the settings. None uses INFO with no file sink.
        verbose: Force DEBUG level regardless of the configured level.
        console: Rich console for log output. Defaults to stderr.

    Returns:
        The configured package logger.
    """
    level_name = "DEBUG" if verbose else (config.level if config else "INFO")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Drop handlers from a previous call so repeated CLI invocations don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    rich_handler.setLevel(level)
    logger.addHandler(rich_handler)

    if config is not None and config.file is not None:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
