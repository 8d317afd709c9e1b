"""Field kinds and string-to-value coercion.

Every bindable annotation maps to one of a closed set of kinds:

    BoolKind, SignedIntKind(bits), UnsignedIntKind(bits),
    FloatKind(bits), StringKind, UnsupportedKind(name)

Plain ``int`` and ``float`` are 64-bit. Narrower widths are declared with the
aliases below, which are ordinary ``int``/``float`` at runtime:

    @dataclass
    class Cfg:
        port: UInt16 = env_field("PORT", default=8080)
        ratio: Float32 = env_field("RATIO", default=0.5)
"""

from __future__ import annotations

import math
import re
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, NewType

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
UInt = NewType("UInt", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _syntax_error(raw: str) -> ValueError:
    return ValueError(f"parsing {raw!r}: invalid syntax")


def _range_error(raw: str) -> ValueError:
    return ValueError(f"parsing {raw!r}: value out of range")


class Kind(ABC):
    """A coercion family. ``coerce`` raises ValueError on bad input."""

    supported = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in error messages."""

    @abstractmethod
    def coerce(self, raw: str) -> Any:
        """Convert ``raw`` to a value of this kind."""


@dataclass(frozen=True)
class BoolKind(Kind):
    @property
    def name(self) -> str:
        return "bool"

    def coerce(self, raw: str) -> bool:
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise _syntax_error(raw)


@dataclass(frozen=True)
class SignedIntKind(Kind):
    bits: int = 64

    @property
    def name(self) -> str:
        return f"int{self.bits}"

    def coerce(self, raw: str) -> int:
        if not _SIGNED_RE.fullmatch(raw):
            raise _syntax_error(raw)
        value = int(raw)
        limit = 1 << (self.bits - 1)
        if not -limit <= value < limit:
            raise _range_error(raw)
        return value


@dataclass(frozen=True)
class UnsignedIntKind(Kind):
    bits: int = 64

    @property
    def name(self) -> str:
        return f"uint{self.bits}"

    def coerce(self, raw: str) -> int:
        if not _UNSIGNED_RE.fullmatch(raw):
            raise _syntax_error(raw)
        value = int(raw)
        if value >= 1 << self.bits:
            raise _range_error(raw)
        return value


@dataclass(frozen=True)
class FloatKind(Kind):
    bits: int = 64

    @property
    def name(self) -> str:
        return f"float{self.bits}"

    def coerce(self, raw: str) -> float:
        if not _FLOAT_RE.fullmatch(raw):
            raise _syntax_error(raw)
        value = float(raw)
        if math.isinf(value) and "inf" not in raw.lower():
            raise _range_error(raw)
        if self.bits == 32 and math.isfinite(value):
            try:
                # Round to single precision
                value = struct.unpack("f", struct.pack("f", value))[0]
            except OverflowError as exc:
                raise _range_error(raw) from exc
            # Some interpreters pack out-of-range values as inf instead of raising
            if math.isinf(value):
                raise _range_error(raw)
        return value


@dataclass(frozen=True)
class StringKind(Kind):
    @property
    def name(self) -> str:
        return "string"

    def coerce(self, raw: str) -> str:
        return raw


@dataclass(frozen=True)
class UnsupportedKind(Kind):
    type_name: str = "unknown"

    supported = False

    @property
    def name(self) -> str:
        return self.type_name

    def coerce(self, raw: str) -> Any:
        raise TypeError(f"field {self.type_name} is not supported")


_KINDS: Dict[Any, Kind] = {
    bool: BoolKind(),
    str: StringKind(),
    int: SignedIntKind(64),
    Int8: SignedIntKind(8),
    Int16: SignedIntKind(16),
    Int32: SignedIntKind(32),
    Int64: SignedIntKind(64),
    UInt: UnsignedIntKind(64),
    UInt8: UnsignedIntKind(8),
    UInt16: UnsignedIntKind(16),
    UInt32: UnsignedIntKind(32),
    UInt64: UnsignedIntKind(64),
    float: FloatKind(64),
    Float32: FloatKind(32),
    Float64: FloatKind(64),
}


_KINDS_BY_NAME: Dict[str, Kind] = {tp.__name__: kind for tp, kind in _KINDS.items()}


def kind_of(annotation: Any) -> Kind:
    """Return the kind for a type annotation.

    Unresolved string annotations are matched by type name ("int", "UInt16").
    """
    if isinstance(annotation, str):
        return _KINDS_BY_NAME.get(annotation) or UnsupportedKind(annotation)
    try:
        return _KINDS[annotation]
    except (KeyError, TypeError):
        # TypeError: unhashable annotations such as some typing aliases
        name = getattr(annotation, "__name__", None) or repr(annotation)
        return UnsupportedKind(name)


__all__ = [
    "Kind",
    "BoolKind",
    "SignedIntKind",
    "UnsignedIntKind",
    "FloatKind",
    "StringKind",
    "UnsupportedKind",
    "kind_of",
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
