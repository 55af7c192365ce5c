"""Logging setup for the command line entry point.

The library itself only calls ``loguru.logger``; applications decide where
the output goes. Call ``setup_logging`` once at startup.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <7}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

_configured = False


def setup_logging(level: str = "INFO", force: bool = False) -> None:
    """Replace loguru's default sink with a single stderr sink at ``level``."""
    global _configured
    if _configured and not force:
        return

    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, backtrace=False, diagnose=False)
    _configured = True
