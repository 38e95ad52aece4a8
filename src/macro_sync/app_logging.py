"""Logging configuration helpers."""

import logging

LOGGER_NAME = "macro_sync"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(
    level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT
) -> logging.Logger:
    """Configure package logging with a single stream handler.

    Repeated calls only update the level; the first handler is kept.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
