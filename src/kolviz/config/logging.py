"""Logging configuration for KolViz."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from kolviz.config.paths import get_data_dir, is_frozen

# Module-level logger
_logger: Optional[logging.Logger] = None

# Constants
LOG_FILENAME = "kolviz.log"
MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_path(portable: bool = False) -> Path:
    """Get the path to the application log file."""
    return get_data_dir(portable=portable) / LOG_FILENAME


def setup_logging(
    portable: bool = False,
    console: bool = True,
    verbose: bool = False,
    data_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Parser modules log through child loggers (``kolviz.parser.*``), so the
    handlers set here receive their records as well.

    Args:
        portable: If True, use portable data directory for log file
        console: If True, also log to console
        verbose: If True, log at DEBUG (discarded numbers, lookahead misses)
        data_dir: Directory for the log file, overriding the default one

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("kolviz")
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if data_dir is not None:
        log_path = data_dir / LOG_FILENAME
    else:
        log_path = get_log_path(portable=portable)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # Continue without file logging
        print(f"Warning: Could not create log file at {log_path}: {e}")

    if console and not is_frozen():
        # stderr keeps command output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    _logger = logger
    return logger

