"""Logging configuration for the application."""
import logging
import sys
from settings.config import settings

_formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger writing to stdout.
    Calling it twice with the same name returns the same configured logger.
    """
    logger = logging.getLogger(name)
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    # Add handler to logger if not already added
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_formatter)
        logger.addHandler(handler)

    # Prevent duplicate logs
    logger.propagate = False
    return logger
