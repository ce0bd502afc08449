"""Logging configuration for promptkit."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from promptkit.utils.config import Config


def setup_logging(
    config: Config, console_output: bool = False, file_output: bool = True
) -> None:
    """
    Set up logging for promptkit.

    Args:
        config: Application configuration
        console_output: Whether to output logs to stderr (default: False)
        file_output: Whether to write logs under config.logging_path
    """
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format_str)

    # Console format is simpler (no timestamp)
    console_format = "%(levelname)s - %(name)s - %(message)s"
    console_formatter = logging.Formatter(console_format)

    root_logger = logging.getLogger("promptkit")
    root_logger.setLevel(logging.DEBUG)

    # Called once per CLI command; drop handlers from an earlier call
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if file_output:
        config.logging_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.logging_path / "promptkit.log", maxBytes=100_000, backupCount=3
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    # stdout carries rendered prompts, so console logs go to stderr
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(logging.INFO)
        root_logger.addHandler(console_handler)
