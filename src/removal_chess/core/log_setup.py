"""Logging configuration for the application (modules only ever call logging.getLogger(__name__))."""

import logging
import sys

ROOT_LOGGER_NAME = "removal_chess"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger. Calling it again only updates the level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(getattr(h, "_removal_chess", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._removal_chess = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
