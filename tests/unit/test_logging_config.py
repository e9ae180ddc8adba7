"""Tests for logging configuration."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tunnel_bot.logging_config import configure_logging


class TestConfigureLogging:
    def test_default_level(self) -> None:
        logger = configure_logging()

        assert logger.name == "tunnel_bot"
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert len(logger.handlers) == 1

    def test_verbose_level(self) -> None:
        logger = configure_logging(verbose=True)

        assert logger.level == logging.DEBUG

    def test_reconfigure_does_not_duplicate_handlers(self) -> None:
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1

    def test_http_client_loggers_quieted(self) -> None:
        configure_logging(verbose=True)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "bot.log"

        logger = configure_logging(log_file=log_file)
        logger.info("hello")
        logger.handlers[0].flush()

        assert isinstance(logger.handlers[0], RotatingFileHandler)
        assert "hello" in log_file.read_text(encoding="utf-8")
