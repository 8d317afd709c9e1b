"""Base exception classes for envcfg.

All envcfg exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery
"""

from typing import Any, Dict, Optional


class EnvcfgError(Exception):
    """Base exception for all envcfg errors.

    Attributes:
        code: Machine-readable error code (e.g., "MALFORMED_LINE")
        message: Human-readable error message
        details: Optional additional context for debugging/recovery
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization.

        Returns:
            Dictionary with code, message, and details keys.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(EnvcfgError):
    """Base for errors caused by bad input: the target or the source text."""

    pass


class ConfigurationError(EnvcfgError):
    """Base for errors in the environment around a load call.

    Used when a field type cannot be bound or a source cannot be read.
    """

    pass


class InvalidTargetError(ValidationError):
    """Raised when the load target is not a mutable dataclass instance."""

    def __init__(self, target: Any, reason: str = "target must be a dataclass instance"):
        super().__init__(
            code="INVALID_TARGET",
            message=reason,
            details={"type": type(target).__name__},
        )


class MalformedLineError(ValidationError):
    """Raised when a non-blank, non-comment line has no '=' separator."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(
            code="MALFORMED_LINE",
            message=f"key and value must be separated by the sign '=': {line}",
            details={"line": line},
        )


class TypeCoercionError(ValidationError):
    """Raised when a present value cannot be parsed into the field's type."""

    def __init__(self, key: str, value: str, kind: str, reason: str):
        self.key = key
        self.value = value
        self.kind = kind
        super().__init__(
            code="TYPE_COERCION",
            message=f"cannot convert value of {key} to {kind}: {reason}",
            details={"key": key, "value": value, "kind": kind, "reason": reason},
        )


class UnsupportedFieldTypeError(ConfigurationError):
    """Raised when a bound field's declared type has no coercion."""

    def __init__(self, key: str, kind: str):
        self.key = key
        self.kind = kind
        super().__init__(
            code="UNSUPPORTED_FIELD_TYPE",
            message=f"field {kind} is not supported",
            details={"key": key, "kind": kind},
        )


class SourceReadError(ConfigurationError):
    """Raised when a source exists but cannot be opened or read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(
            code="SOURCE_READ",
            message=f"cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )
