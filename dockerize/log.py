"""Logging setup for the command-line interface."""
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "dockerize"


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the ``dockerize`` logger and return it.

    Only the package logger is configured; the root logger is left untouched so
    library users keep control of their own logging.

    Args:
        level: Level name such as "DEBUG" or "INFO"
        stream: Output sink (default: stderr)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(numeric_level)
    if numeric_level <= logging.DEBUG:
        console_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
    else:
        console_handler.setFormatter(logging.Formatter('%(message)s'))

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(console_handler)
    logger.setLevel(numeric_level)
    logger.propagate = False

    # Set log level for specific loggers to reduce noise
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logger
