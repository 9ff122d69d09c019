"""Logging setup for the ledgerbook command line."""

import logging
from typing import Optional

LOGGER_NAME = "ledgerbook"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Attach a handler to the package logger.

    Calling it again replaces the handler instead of adding another one.

    Args:
        verbose: Log DEBUG and up when True, otherwise WARNING and up
        handler: Handler to install; defaults to a stderr stream handler
    """
    reset_logging()
    logger = logging.getLogger(LOGGER_NAME)

    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove installed handlers and hand records back to the root logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
