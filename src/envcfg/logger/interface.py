"""
Logger interface for envcfg.

Anything passed as ``logger=`` to the loader must implement this contract.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract base class for logging interface.

    Every method takes a message plus arbitrary key-value context.

    Example:
        class PrintLogger(Logger):
            def debug(self, message: str, **kwargs: Any) -> None:
                print(f"DEBUG: {message} {kwargs}")
            # ... implement other methods
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message.

        Args:
            message: The message to log
            **kwargs: Additional key-value pairs to include in the log
        """

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""
