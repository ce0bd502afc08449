"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from promptkit.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("promptkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_file_handler_writes_under_logging_path(test_config):
    setup_logging(test_config)

    logging.getLogger("promptkit.core.installer").info("installed")

    log_file = test_config.logging_path / "promptkit.log"
    handlers = logging.getLogger("promptkit").handlers
    assert any(isinstance(h, RotatingFileHandler) for h in handlers)
    for handler in handlers:
        handler.flush()
    assert "installed" in log_file.read_text()


def test_no_file_output_creates_no_directory(test_config):
    setup_logging(test_config, console_output=True, file_output=False)

    handlers = logging.getLogger("promptkit").handlers
    assert not test_config.logging_path.exists()
    assert len(handlers) == 1
    assert handlers[0].level == logging.INFO


def test_repeated_setup_does_not_stack_handlers(test_config):
    setup_logging(test_config, console_output=True)
    setup_logging(test_config, console_output=True)

    assert len(logging.getLogger("promptkit").handlers) == 2
