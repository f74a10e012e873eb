"""Logging configuration for the command line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Send ``billing.*`` log records to the current stderr at *level*.

    Calling it again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger("billing")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        if getattr(handler, "_billing_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._billing_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
