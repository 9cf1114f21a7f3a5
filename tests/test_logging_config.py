import logging
import sys

from config import DEFAULT_LOGGER_NAME, logger, setup_logger


def test_console_handler_writes_to_stderr():
    fresh = setup_logger("review-actions-stderr-check")
    streams = [h.stream for h in fresh.handlers if type(h) is logging.StreamHandler]
    assert streams == [sys.stderr]
    assert sys.stdout not in streams


def test_setup_logger_reuses_configured_logger():
    assert logger.name == DEFAULT_LOGGER_NAME
    again = setup_logger()
    assert again is logger
    assert len([h for h in again.handlers if type(h) is logging.StreamHandler]) == 1
