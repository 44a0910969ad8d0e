"""Logging configuration for the site capacity optimizer."""
import logging
import logging.handlers
from typing import Optional

from ..config.settings import settings


def configure_logging(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for a module.

    Handlers are attached once per logger; calling again only updates the level.

    Args:
        name: Logger name (typically __name__ or the package name)
        level: Log level override (default: settings.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or settings.LOG_LEVEL)

    if logger.handlers:
        return logger

    # Create formatters and handlers
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler
    if settings.LOG_TO_FILE:
        log_dir = settings.LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f'{name}.log',
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
