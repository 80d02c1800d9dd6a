import logging
from contextlib import contextmanager
from typing import Iterator

from imagemaker.loggers.logging_config import (
    DEFAULT_LOG_LEVEL,
    LOGGER_NAME,
    LogSettings,
    check_log_level,
    configure_logging,
    set_level,
)


@contextmanager
def temporary_log_level(level: str, name: str = LOGGER_NAME) -> Iterator[None]:
    """
    Change the level of the ``name`` logger for the duration of a block.

    Examples
    --------
    >>> with temporary_log_level("ERROR"):
    ...     logger.warning("dropped")
    ...     logger.error("kept")
    """
    stdlib_logger = logging.getLogger(name)
    previous = stdlib_logger.level
    stdlib_logger.setLevel(check_log_level(level))
    try:
        yield
    finally:
        stdlib_logger.setLevel(previous)


logger = configure_logging(LOGGER_NAME)

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LOGGER_NAME",
    "LogSettings",
    "configure_logging",
    "logger",
    "set_level",
    "temporary_log_level",
]
