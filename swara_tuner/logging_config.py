"""Centralized logging configuration for Swara Tuner.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "swara_tuner": logging.INFO,
    "swara_tuner.core": logging.INFO,
    # Signal chain
    "swara_tuner.audio": logging.INFO,
    "swara_tuner.audio.pitch_detector": logging.INFO,  # DEBUG logs every lock-on
    "swara_tuner.detection": logging.INFO,
    "swara_tuner.note_recorder": logging.INFO,
    "swara_tuner.cli": logging.INFO,
    "swara_tuner.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "sounddevice": logging.ERROR,
    "soundfile": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'swara_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("swara_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Only top-level entries get the handler;
    # their children propagate up to them.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if "." not in module_name:
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("swara_tuner").info("Logging configuration complete")
