"""
Settings and the shared logger for review-actions
"""

from .settings import Settings, settings
from .logging_config import DEFAULT_LOGGER_NAME, logger, setup_logger

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "Settings",
    "settings",
    "logger",
    "setup_logger"
]
