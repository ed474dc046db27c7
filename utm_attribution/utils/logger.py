"""
Logging configuration
"""
from loguru import logger
import sys
from utm_attribution.config import get_settings

settings = get_settings()


def setup_logger():
    """Configure logger with appropriate settings"""
    logger.remove()  # Remove default handler

    # Console logging
    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )

    # File logging, only when a path is configured
    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="00:00",
            retention="30 days",
            compression="zip",
            level=settings.log_level
        )

    return logger


# Initialize logger
log = setup_logger()
