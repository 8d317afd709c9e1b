"""Load .env files and OS environment variables into dataclass fields.

Values are applied in deterministic order:
1) .env file (if it exists)
2) OS environment variables
3) Explicit overrides (highest precedence)

Fields not named by any source keep the defaults already set on the target.

Example:
    @dataclass
    class Cfg:
        debug: bool = env_field("DEBUG", default=True)
        database_url: str = env_field("DATABASE_URL", default="sqlite:///db.sqlite")

    cfg = load(Cfg())
"""

from __future__ import annotations

import os
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TypeVar

from envcfg.config.fields import FieldDescriptor, collect_fields, is_dataclass_instance
from envcfg.config.source import (
    iter_environ_lines,
    iter_file_lines,
    read_source,
)
from envcfg.exceptions import (
    InvalidTargetError,
    SourceReadError,
    TypeCoercionError,
    UnsupportedFieldTypeError,
)
from envcfg.logger import Logger, get_logger

T = TypeVar("T")

DEFAULT_ENV_FILE = ".env"


def _validate_target(target: Any) -> None:
    # Loading target must be a mutable dataclass instance
    if not is_dataclass_instance(target):
        raise InvalidTargetError(target)
    if type(target).__dataclass_params__.frozen:
        raise InvalidTargetError(target, "target must not be a frozen dataclass")


def bind(descriptors: List[FieldDescriptor], values: Mapping[str, str]) -> int:
    """Coerce and assign every descriptor whose key is in ``values``.

    Stops at the first failure; fields earlier in the list stay assigned.

    Returns:
        Number of fields assigned

    Raises:
        UnsupportedFieldTypeError: If a present key targets an unsupported type
        TypeCoercionError: If a present value cannot be parsed
    """
    bound = 0
    for descriptor in descriptors:
        if descriptor.key not in values:
            continue

        raw = values[descriptor.key]
        kind = descriptor.kind
        if not kind.supported:
            raise UnsupportedFieldTypeError(descriptor.key, kind.name)

        try:
            value = kind.coerce(raw)
        except ValueError as exc:
            raise TypeCoercionError(descriptor.key, raw, kind.name, str(exc)) from exc

        descriptor.set(value)
        bound += 1
    return bound


class EnvLoader:
    """Load a .env file and the OS environment into dataclass instances."""

    def __init__(
        self,
        env_file: Optional[Path | str] = None,
        environ: Optional[Mapping[str, str]] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Args:
            env_file: Path of the .env file; ``<cwd>/.env`` when omitted (None).
                Any other value, including an empty string, is used as given
            environ: Environment to read instead of ``os.environ``
            logger: Logger for debug output; the shared envcfg logger by default
        """
        self.env_file = env_file
        self.environ = environ
        self.logger = logger or get_logger()

    def resolve_env_file(self) -> Path | str:
        if self.env_file is not None:
            return self.env_file
        try:
            return Path.cwd() / DEFAULT_ENV_FILE
        except OSError as exc:
            raise SourceReadError(DEFAULT_ENV_FILE, f"working directory unavailable: {exc}") from exc

    def load(self, target: T, overrides: Optional[Mapping[str, Any]] = None) -> T:
        """Populate ``target`` in place and return it.

        Precedence (low -> high): defaults on target, .env file, OS env vars, overrides

        Raises:
            InvalidTargetError: If target is not a mutable dataclass instance
            MalformedLineError: If a source line has no '=' separator
            TypeCoercionError: If a value cannot be parsed into its field type
            UnsupportedFieldTypeError: If a present key targets an unsupported type
            SourceReadError: If the .env file exists but cannot be read
        """
        _validate_target(target)
        env_path = self.resolve_env_file()

        descriptors = collect_fields(target)
        self.logger.debug(
            "Collected bindable fields",
            target=type(target).__name__,
            count=len(descriptors),
        )

        if not os.path.exists(env_path):
            self.logger.debug("Env file not found, skipping", path=str(env_path))

        with closing(iter_file_lines(env_path)) as lines:
            self._apply(descriptors, read_source(lines), source=str(env_path))

        # Override values by loading OS environment variables
        self._apply(descriptors, read_source(iter_environ_lines(self.environ)), source="environment")

        if overrides:
            self._apply(descriptors, {k: str(v) for k, v in overrides.items()}, source="overrides")

        return target

    def _apply(self, descriptors: List[FieldDescriptor], values: Dict[str, str], source: str) -> None:
        bound = bind(descriptors, values)
        self.logger.debug("Bound fields from source", source=source, entries=len(values), bound=bound)


def load_file(
    filename: Path | str,
    target: T,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    logger: Optional[Logger] = None,
) -> T:
    """Load values from ``filename`` and then the OS environment into ``target``.

    A missing file is not an error; the environment is still applied.
    """
    return EnvLoader(filename, environ=environ, logger=logger).load(target, overrides)


def load(
    target: T,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    logger: Optional[Logger] = None,
) -> T:
    """Load values from ``.env`` in the working directory and then the OS environment."""
    return EnvLoader(environ=environ, logger=logger).load(target, overrides)


__all__ = ["DEFAULT_ENV_FILE", "EnvLoader", "bind", "load", "load_file"]
