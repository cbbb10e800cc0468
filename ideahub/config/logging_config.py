"""Loguru sink setup for the web app and scripts."""

import sys

from loguru import logger

from ideahub.config.config import DEBUG, LOG_FILE, LOG_LEVEL

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = None, log_file: str = None) -> None:
    """Replace loguru's default sink with the configured ones."""
    level = level or ("DEBUG" if DEBUG else LOG_LEVEL)
    log_file = LOG_FILE if log_file is None else log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", retention=5)
    logger.debug(f"Logging configured at level={level} file={log_file or '-'}")
