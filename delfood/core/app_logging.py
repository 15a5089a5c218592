"""Logging configuration helpers."""

import logging

from .config import get_settings

LOGGER_NAME = "delfood"


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    settings = get_settings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
