"""Centralized logging configuration."""

import sys

from loguru import logger

from src.config import settings

log_format = " | ".join(
    (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level:<8}</level>",
        "<cyan>{name}:{function}:{line}</cyan>",
        "{message}",
    )
)

def setup_logging(level: str = None, log_dir: str = None):
    """Replace the default loguru sink with the application sinks"""
    level = (level or settings.LOG_LEVEL).upper()
    log_dir = log_dir or settings.LOG_DIR

    logger.remove()
    logger.add(sys.stderr, format=log_format, level=level, backtrace=settings.DEBUG, diagnose=settings.DEBUG)

    if log_dir:
        logger.add(
            f"{log_dir}/tigertix_{{time:YYYY-MM-DD}}.log",
            format=log_format,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="zip",
            enqueue=True,
        )

    return logger
