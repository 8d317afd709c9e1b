"""
envcfg Logger Module

Usage:
    from envcfg.logger import get_logger, create_logger

    logger = get_logger()
    logger.debug("Collected bindable fields", count=4)

    logger = create_logger(name="envcfg", level=logging.DEBUG, json_format=True)

Environment Variables:
    {PREFIX}_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    {PREFIX}_LOG_FILE: Optional file path for log output
    {PREFIX}_LOG_JSON: Set to "true" for JSON output format

    Where {PREFIX} is derived from the logger name (e.g., ENVCFG for "envcfg")
"""

import logging
import os
from typing import Optional

from .interface import Logger
from .structured_logger import JsonFormatter, StructuredLogger, TextFormatter


def _get_env_prefix(name: str) -> str:
    """Convert logger name to environment variable prefix.

    Examples:
        "envcfg" -> "ENVCFG"
        "my-app.config" -> "MY_APP_CONFIG"
    """
    return name.upper().replace("-", "_").replace(".", "_")


def create_logger(
    name: str = "envcfg",
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> Logger:
    """Create a new logger instance with the specified configuration.

    Parameters left as None are read from {PREFIX}_LOG_LEVEL,
    {PREFIX}_LOG_FILE and {PREFIX}_LOG_JSON.

    Args:
        name: Logger name
        level: Logging level (defaults to INFO or env var)
        log_file: Optional file path for log output
        json_format: If True, output logs as JSON

    Returns:
        A configured Logger instance
    """
    env_prefix = _get_env_prefix(name)

    if level is None:
        level_str = os.environ.get(f"{env_prefix}_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_str, logging.INFO)

    if log_file is None:
        log_file = os.environ.get(f"{env_prefix}_LOG_FILE")

    if json_format is None:
        json_format = os.environ.get(f"{env_prefix}_LOG_JSON", "false").lower() == "true"

    return StructuredLogger(
        name=name,
        level=level,
        log_file=log_file,
        json_format=json_format,
    )


# Loggers created by get_logger, per name
_loggers: dict[str, Logger] = {}


def get_logger(name: str = "envcfg") -> Logger:
    """Get the shared logger for ``name``, creating it from the environment once.

    Args:
        name: Logger name

    Returns:
        A configured Logger instance
    """
    if name not in _loggers:
        _loggers[name] = create_logger(name=name)
    return _loggers[name]


def reset_loggers(name: Optional[str] = None) -> None:
    """Forget cached loggers (primarily for testing)

    Args:
        name: Specific logger to forget, or None to forget all
    """
    if name:
        _loggers.pop(name, None)
    else:
        _loggers.clear()


__all__ = [
    # Interface
    "Logger",
    # Implementation
    "StructuredLogger",
    # Formatters (for custom use)
    "JsonFormatter",
    "TextFormatter",
    # Factory functions
    "create_logger",
    "get_logger",
    "reset_loggers",
]
