"""Logging configuration for the invoice numbering service."""

import sys
from typing import Optional

from loguru import logger

from invoice_numbering.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def setup_logger(level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Configure the logger for the application.

    Counter reservations run on request threads, so the file sink records
    the thread name next to each line.
    """
    level = (level or settings.log_level).upper()
    log_file = log_file if log_file is not None else settings.log_file

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stdout,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        diagnose=settings.debug,
    )

    if log_file:
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            diagnose=settings.debug,
        )

    return logger


# Initialize logger
logger = setup_logger()
