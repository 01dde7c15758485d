"""Centralized logging configuration for the string detector.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "string_detector": logging.INFO,
    "string_detector.core": logging.INFO,
    "string_detector.cli": logging.INFO,
    # Signal analysis is chatty at DEBUG (one line per frame)
    "string_detector.audio": logging.INFO,
    "string_detector.detection": logging.INFO,
    "string_detector.services": logging.INFO,
    # Libraries/third-party
    "sounddevice": logging.WARNING,
    "soundfile": logging.WARNING,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'string_detector' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("string_detector"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Sub-package loggers keep propagating to
    # "string_detector" so each record is printed once.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        if module_name in ("", "string_detector") or "." not in module_name:
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("string_detector").info("Logging configuration complete")
