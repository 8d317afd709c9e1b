"""Exceptions raised by envcfg.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Usage:
    from envcfg.exceptions import (
        EnvcfgError,
        MalformedLineError,
        TypeCoercionError,
    )
"""

from envcfg.exceptions.base import (
    ConfigurationError,
    EnvcfgError,
    InvalidTargetError,
    MalformedLineError,
    SourceReadError,
    TypeCoercionError,
    UnsupportedFieldTypeError,
    ValidationError,
)

__all__ = [
    # Base exceptions
    "EnvcfgError",
    "ValidationError",
    "ConfigurationError",
    # Load errors
    "InvalidTargetError",
    "MalformedLineError",
    "TypeCoercionError",
    "UnsupportedFieldTypeError",
    "SourceReadError",
]
