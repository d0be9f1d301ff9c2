"""Logging setup shared by the CLI and embedding applications.

Usage:
    from balancebook.logging_config import setup_logging
    setup_logging("INFO")
"""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO output drowns ours
NOISY_LOGGERS = [
    "sqlalchemy",
    "sqlalchemy.engine",
]

_HANDLER_NAME = "balancebook-stderr"


def setup_logging(level: Union[str, int] = logging.WARNING) -> logging.Logger:
    """Configure the ``balancebook`` logger to write to stderr.

    Calling it again replaces the handler installed by the previous call, so
    the handler always points at the current ``sys.stderr``.

    Args:
        level: Level name ("DEBUG", "info", ...) or numeric level

    Returns:
        The configured ``balancebook`` logger
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.strip().upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Invalid log level '{level}'")
        level = numeric

    logger = logging.getLogger("balancebook")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
