import logging
from logging import Logger


"""
Logger setup for EspacoGeek.
Import `logger` anywhere and use `logger.getChild(...)` for per-module loggers.

date: 2026-10-19
version: 0.1.0
"""

# LOGGER_NAME is used to identify the logger.
LOGGER_NAME = "espaco_geek"

logger: Logger = logging.getLogger(LOGGER_NAME)


def setup(level: str = "INFO") -> None:
    """
    Setup the logger.
    """
    if logger.handlers:
        return  # already configured
    logger.setLevel(level.upper())

    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(fmt))
    logger.addHandler(h)

    # child loggers (espaco_geek.*) reach this handler; do not double-log via root
    logger.propagate = False


def get_logger(name: str) -> Logger:
    """Child logger under the package logger, e.g. get_logger("search.engine")."""
    return logger.getChild(name)
