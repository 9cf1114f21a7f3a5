"""
Logging configuration helpers and shared logger instance
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from config.settings import settings

DEFAULT_LOGGER_NAME = "review-actions"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s:%(lineno)d - %(message)s"

def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt=settings.log_format or DEFAULT_FORMAT,
        datefmt=settings.log_date_format
    )

def _build_file_handler(formatter: logging.Formatter) -> logging.Handler:
    """Rotating file handler writing to settings.log_file_path"""
    log_path = Path(settings.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_path,
        when=settings.log_file_rotation,
        interval=1,
        backupCount=settings.log_file_retention,
        encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler

def setup_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Configure and return a named logger writing to stderr and optionally a file

    Configuration is loaded from settings (LOG_LEVEL, LOG_TO_FILE, LOG_FILE_*)

    Args:
        name: Logger name (default 'review-actions')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
        logger.setLevel(level)
        formatter = _build_formatter()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if settings.log_to_file:
            logger.addHandler(_build_file_handler(formatter))

    logger.propagate = False
    return logger

logger = setup_logger()
