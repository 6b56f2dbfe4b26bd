"""
Centralized logging configuration.

Handlers live on the 'abnt' package logger only. Module loggers such as
'abnt.layout.agent' carry none and propagate to it, so configuration
happens once, on first use, and never at import time.
"""
import logging
import logging.handlers
from typing import Optional

from .constants import LOGGER_NAME, LOG_FORMAT, LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
from .settings import settings


def _configure_root(logger: logging.Logger) -> None:
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Console handler - INFO level
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    # File handler with rotation - DEBUG level, only when asked for
    if settings.log_file:
        log_path = settings.log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the configured 'abnt' package logger.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)
        logger.info("Message here")

    Args:
        name: Logger name. If None, the package logger itself.

    Returns:
        logging.Logger; names outside 'abnt' are nested under it.
    """
    root = logging.getLogger(LOGGER_NAME)

    # Avoid adding handlers multiple times
    if not root.handlers:
        _configure_root(root)

    if not name or name == LOGGER_NAME:
        return root
    if not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Alias for setup_logger for convenience.

    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return setup_logger(name)
