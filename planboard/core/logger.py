"""
Logger factory shared by services.
"""

import logging
import sys

from planboard.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """
    Get a configured logger.

    Calling this repeatedly for the same name does not attach duplicate handlers.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger with a stream handler and level from settings
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(get_settings().LOG_LEVEL.upper())
    return logger
