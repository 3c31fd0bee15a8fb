"""
Logger Setup
------------
Loguru configuration for the dealer backend.

Debug runs log to the console only. Deployed runs also write a daily file
named after the application, rotated and pruned as configured in
``ApplicationSettings``.
"""

import sys
from loguru import logger
from app.core.config_manager import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def configure_logger() -> None:
    """Replace loguru's default handler with the service sinks."""
    logger.remove()

    # Variable values in tracebacks only while debugging
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.debug,
    )

    if not settings.debug:
        logger.add(
            settings.log_file_path,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            level=settings.log_level,
            format=FILE_FORMAT,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logger configured with level: {settings.log_level}")


configure_logger()
