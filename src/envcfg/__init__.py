"""envcfg - Load .env files and environment variables into dataclasses.

This package provides:
- config: Field discovery, .env parsing and typed binding
- logger: Structured logging used by the loader
- exceptions: Exception classes with structured error info

Values are first loaded from the .env file (if it exists) and then from the
OS environment variables, which override the values loaded from the file.
"""

__version__ = "1.0.0"

# Re-export commonly used items for convenience
from envcfg.config import (
    ENV_TAG,
    EnvLoader,
    FieldDescriptor,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    collect_fields,
    env_field,
    load,
    load_file,
    read_source,
)

from envcfg.exceptions import (
    ConfigurationError,
    EnvcfgError,
    InvalidTargetError,
    MalformedLineError,
    SourceReadError,
    TypeCoercionError,
    UnsupportedFieldTypeError,
    ValidationError,
)

from envcfg.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

__all__ = [
    "__version__",
    # Config
    "load",
    "load_file",
    "EnvLoader",
    "env_field",
    "collect_fields",
    "FieldDescriptor",
    "read_source",
    "ENV_TAG",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    # Exceptions
    "EnvcfgError",
    "ValidationError",
    "ConfigurationError",
    "InvalidTargetError",
    "MalformedLineError",
    "TypeCoercionError",
    "UnsupportedFieldTypeError",
    "SourceReadError",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
]
