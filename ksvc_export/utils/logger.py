"""Logging configuration."""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "KSVC_EXPORT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_level() -> int:
    """Level named by KSVC_EXPORT_LOG_LEVEL, INFO when unset or unknown."""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.

    Records go to stderr so stdout stays reserved for the manifest.
    """
    logger = logging.getLogger(name or __name__)

    # Only configure if no handlers exist
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(default_level())

    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch every ksvc_export logger to DEBUG, or back to the default level."""
    level = logging.DEBUG if verbose else default_level()
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("ksvc_export") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
