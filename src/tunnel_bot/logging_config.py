"""Logging configuration for tunnel-bot."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tunnel_bot.constants import (
    LOG_DATE_FORMAT,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    LOG_FORMAT_DEBUG,
    LOG_FORMAT_DEFAULT,
    LOGGER_NAME,
)


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbose: Log at DEBUG level (with logger name and line) instead of INFO.
        log_file: Optional log file path. When set, logs go to a rotating
            file instead of stderr.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.INFO

    bot_logger = logging.getLogger(LOGGER_NAME)
    bot_logger.setLevel(level)
    bot_logger.propagate = False

    # Clear any existing handlers to avoid duplicates on reconfigure
    bot_logger.handlers.clear()

    # httpx logs every request URL at INFO, and Bot API URLs contain the token
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if verbose:
        formatter = logging.Formatter(LOG_FORMAT_DEBUG, datefmt=LOG_DATE_FORMAT)
    else:
        formatter = logging.Formatter(LOG_FORMAT_DEFAULT, datefmt=LOG_DATE_FORMAT)

    handler: logging.Handler
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_file,
                mode="a",
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as e:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            bot_logger.addHandler(handler)
            bot_logger.warning(f"Could not set up file logging to {log_file}: {e}")
            return bot_logger
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    bot_logger.addHandler(handler)
    return bot_logger
