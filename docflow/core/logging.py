"""Logging setup for Docflow.

The ``docflow`` logger gets a console handler and, when enabled, a
size-rotated file under ``log_dir``. Timestamps are ISO 8601. Modules log
through ``logging.getLogger(__name__)`` and propagate up to it.
"""

import logging
import logging.handlers
import os
from typing import List, Optional

from docflow.core.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_level(level: str) -> int:
    level_upper = level.upper()
    if level_upper not in VALID_LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(VALID_LEVELS)}")
    return getattr(logging, level_upper)


def _build_handlers(
    name: str,
    log_dir: str,
    file_logging: bool,
    console_logging: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    if console_logging:
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logger(
    name: str,
    log_dir: str = "./logs",
    level: str = "INFO",
    log_format: Optional[str] = None,
    file_logging: bool = False,
    console_logging: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to the named logger and set its level.

    Calling it again only updates the level; handlers are added once.

    Raises:
        ValueError: If ``level`` is not a standard level name
    """
    logger = logging.getLogger(name)
    logger.setLevel(_parse_level(level))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(log_format or LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(name, log_dir, file_logging, console_logging, max_bytes, backup_count):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_logging(settings: Settings) -> logging.Logger:
    """Set up the ``docflow`` logger from settings."""
    logger = setup_logger(
        "docflow",
        log_dir=settings.log_dir,
        level=settings.log_level,
        file_logging=settings.log_to_file,
    )
    # SQL echo stays off unless the app itself is debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug and settings.log_level.upper() == "DEBUG" else logging.WARNING
    )
    return logger
