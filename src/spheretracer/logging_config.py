"""Logging configuration for spheretracer."""

import logging
import sys
from typing import Optional

from spheretracer.config import LOG_FORMAT, LOG_LEVEL


def setup_logging(
    level: Optional[str] = None,
    name: str = "spheretracer",
) -> logging.Logger:
    """
    Set up logging configuration.

    Records go to stderr so that an image written to stdout stays intact.
    Calling this again only updates the level.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name

    Returns:
        Configured logger instance
    """
    if level is None:
        level = LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    handler = next(
        (h for h in logger.handlers if getattr(h, "_spheretracer", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._spheretracer = True
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    handler.setLevel(numeric_level)

    return logger
