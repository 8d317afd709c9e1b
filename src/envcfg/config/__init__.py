"""Configuration binding for dataclasses.

Populates dataclass fields from a .env file and the OS environment, with
environment values taking precedence over file values and both over the
defaults already on the instance.

Example:
    from dataclasses import dataclass
    from envcfg.config import UInt16, env_field, load

    @dataclass
    class Cfg:
        debug: bool = env_field("DEBUG", default=False)
        port: UInt16 = env_field("PORT", default=8080)

    cfg = load(Cfg())
"""

from envcfg.config.env_loader import DEFAULT_ENV_FILE, EnvLoader, bind, load, load_file
from envcfg.config.fields import ENV_TAG, FieldDescriptor, collect_fields, env_field
from envcfg.config.kinds import (
    BoolKind,
    Float32,
    Float64,
    FloatKind,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    SignedIntKind,
    StringKind,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    UnsignedIntKind,
    UnsupportedKind,
    kind_of,
)
from envcfg.config.source import parse_line, read_source

__all__ = [
    # Entry points
    "load",
    "load_file",
    "EnvLoader",
    "DEFAULT_ENV_FILE",
    # Field collection
    "ENV_TAG",
    "env_field",
    "collect_fields",
    "FieldDescriptor",
    # Parsing and binding
    "parse_line",
    "read_source",
    "bind",
    # Kinds
    "Kind",
    "BoolKind",
    "SignedIntKind",
    "UnsignedIntKind",
    "FloatKind",
    "StringKind",
    "UnsupportedKind",
    "kind_of",
    # Width aliases
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
]
