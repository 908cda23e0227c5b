"""
Logging Configuration Module

Provides consistent logging setup across all modules.

Usage:
    from reaxmlfeed.logging_config import setup_logging, get_logger

    setup_logging()  # Call once at application startup
    logger = get_logger(__name__)
    logger.info("Ingestion started")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from reaxmlfeed.config import get_config

PACKAGE_LOGGER = "reaxmlfeed"

# Track if logging has been set up
_logging_configured = False


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to config value or INFO.
        log_file: Path to log file. If None, logs to console only.
        force: Force reconfiguration even if already configured.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    config = get_config()

    if level is None:
        level = config.logging.level
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if log_file is None:
        log_file = config.logging.log_file

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Console handler (always)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.propagate = False

    # Reduce noise from external libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance.
    """
    if not _logging_configured:
        setup_logging()

    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _logging_configured
    _logging_configured = False

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.handlers.clear()
