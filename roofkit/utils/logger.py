"""
Logging utilities for roofkit.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str,
                level: Union[int, str] = logging.INFO,
                log_file: Optional[str] = None,
                format_string: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        level: Logging level (int or level name such as "DEBUG")
        log_file: Optional log file path
        format_string: Optional custom format string

    Returns:
        Configured logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    # Console output goes to stderr so stdout stays clean for CLI JSON
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get an existing logger or create a new one.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_config(config: Union[Mapping[str, Any], Any], logger: logging.Logger):
    """Log configuration values, one per line."""
    if hasattr(config, 'model_dump'):
        config = config.model_dump(mode='json')
    logger.info("Roof configuration:")
    _log_items(config, logger, indent=1)


def _log_items(items: Mapping[str, Any], logger: logging.Logger, indent: int):
    pad = "  " * indent
    for key in sorted(items):
        value = items[key]
        if isinstance(value, Mapping):
            logger.info(f"{pad}{key}:")
            _log_items(value, logger, indent + 1)
        else:
            logger.info(f"{pad}{key}: {value}")
