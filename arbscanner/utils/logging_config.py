"""
Logging setup for the Arbitrage Scanner.
"""

import logging
from typing import Optional, Union

from .. import config


def resolve_level(level: Union[int, str, None]) -> int:
    """Turn a level name such as 'debug' (or a number) into a logging level."""
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Configure timestamped logging for the ``arbscanner`` package.

    Args:
        level: Level name or number (default: ``ARB_LOG_LEVEL``, else INFO)

    Returns:
        The package logger; module loggers are its children
    """
    level = resolve_level(level)
    logging.basicConfig(
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
    )
    logger = logging.getLogger("arbscanner")
    logger.setLevel(level)
    return logger
