"""
Structured logger backed by the standard logging module.

Writes either human-readable text or one JSON object per line, to stdout and
optionally to a file.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .interface import Logger

# Attributes every LogRecord carries; anything else came from **kwargs
RESERVED_ATTRS = frozenset(
    {
        "args", "asctime", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    }
)


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """Format records as JSON objects for log aggregation systems."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        log_data.update(_extra_fields(record))
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Text formatter that appends extra kwargs as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)
        extra = _extra_fields(record)
        if extra:
            s += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return s


class StructuredLogger(Logger):
    """Logger implementation with text or JSON output and optional file output.

    Example:
        logger = StructuredLogger(name="envcfg", level=logging.DEBUG)
        logger.debug("Bound fields from source", source="environment", bound=3)
    """

    def __init__(
        self,
        name: str = "envcfg",
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        json_format: bool = False,
    ):
        """Initialize the structured logger.

        Args:
            name: Logger name
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
            log_file: Optional file path for log output
            json_format: If True, output logs as JSON; otherwise use text format
        """
        self._name = name
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Clear existing handlers to avoid duplication if re-initialized
        if self._logger.hasHandlers():
            self._logger.handlers.clear()

        self._logger.propagate = False

        if json_format:
            formatter: logging.Formatter = JsonFormatter()
        else:
            formatter = TextFormatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s")

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self._logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> int:
        return self._logger.level

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        # Prefix reserved keys to preserve them but avoid collision
        extra = {(f"_{k}" if k in RESERVED_ATTRS else k): v for k, v in kwargs.items()}
        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, **kwargs)
