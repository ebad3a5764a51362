# utils/logging.py

"""Logging helpers for lyricsmith."""

from __future__ import annotations

import logging
import logging.handlers
import os

import structlog
from config import settings
from rich.console import Console
from rich.logging import RichHandler

logger = structlog.get_logger(__name__)


__all__ = ["setup_logging"]


def _resolve_log_path(log_file: str) -> str:
    if os.path.isabs(log_file):
        return log_file
    return os.path.join(settings.LOG_DIR, log_file)


def _build_file_handler(log_file: str) -> logging.Handler:
    file_path = _resolve_log_path(log_file)
    log_dir = os.path.dirname(file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        mode="a",
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)
    )
    return handler


def _build_console_handler(level: str) -> logging.Handler:
    if settings.ENABLE_RICH_LOGGING:
        # stdout carries CLI output; square brackets in prompts must not be read as markup
        return RichHandler(
            level=level,
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            show_time=True,
            show_level=True,
        )
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)
    )
    return handler


def setup_logging(level: str | None = None) -> None:
    """Configure structlog over stdlib logging for the CLI.

    ``level`` overrides ``settings.LOG_LEVEL_STR``. Console output goes to
    stderr; a rotating file handler is added when ``settings.LOG_FILE`` is set.
    """
    level = (level or settings.LOG_LEVEL_STR).upper()

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    if settings.LOG_FILE:
        try:
            root_logger.addHandler(_build_file_handler(settings.LOG_FILE))
        except OSError as e:
            logger.error("Error setting up file logger: %s", e)

    root_logger.addHandler(_build_console_handler(level))

    structlog.get_logger().info("lyricsmith logging setup complete.", log_level=level)
