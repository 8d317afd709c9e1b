"""Discover bindable fields on a dataclass instance.

A field is bindable when it is public (no leading underscore) and carries a
non-empty ``env`` key in its metadata. ``env_field`` sets that key:

    @dataclass
    class Cfg:
        debug: bool = env_field("DEBUG", default=False)
        database_url: str = env_field("DATABASE_URL", default="sqlite:///db.sqlite")

Fields holding a dataclass instance are recursed into, so nested settings need
no special syntax in the ``.env`` file.
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import MISSING, dataclass
from typing import Any, Dict, List

from envcfg.config.kinds import Kind, kind_of

ENV_TAG = "env"


def env_field(key: str, default: Any = MISSING, *, default_factory: Any = MISSING, **kwargs: Any) -> Any:
    """``dataclasses.field`` that binds the field to ``key``.

    Args:
        key: Name of the environment variable / .env entry
        default: Default value, as for ``dataclasses.field``
        default_factory: Default factory, as for ``dataclasses.field``
        **kwargs: Any other ``dataclasses.field`` argument; existing
            ``metadata`` is kept alongside the binding key
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ENV_TAG] = key
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata, **kwargs
    )


@dataclass
class FieldDescriptor:
    """A bindable field: its key plus a handle on the owning instance.

    Only valid while ``owner`` is alive; never keep one past a load call.
    """

    key: str
    owner: Any
    name: str
    annotation: Any

    @property
    def kind(self) -> Kind:
        return kind_of(self.annotation)

    def get(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


def is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _type_hints(cls: type) -> Dict[str, Any]:
    """Resolved annotations of ``cls``.

    String annotations naming function-local classes cannot be resolved; in
    that case the raw ``Field.type`` strings are used and ``kind_of`` matches
    them by name.
    """
    try:
        return typing.get_type_hints(cls)
    except NameError:
        return {}


def collect_fields(target: Any) -> List[FieldDescriptor]:
    """Return the bindable fields of ``target`` in declaration order.

    Nested dataclass instances are expanded in place. Their own ``env``
    metadata is ignored; only leaves are bound.
    """
    descriptors: List[FieldDescriptor] = []
    hints = _type_hints(type(target))

    for f in dataclasses.fields(target):
        # Skip private field
        if f.name.startswith("_"):
            continue

        # init=False fields may not be assigned yet
        value = getattr(target, f.name, MISSING)
        if is_dataclass_instance(value):
            descriptors.extend(collect_fields(value))
            continue

        key = f.metadata.get(ENV_TAG)
        if not key or not isinstance(key, str):
            continue

        descriptors.append(
            FieldDescriptor(
                key=key,
                owner=target,
                name=f.name,
                annotation=hints.get(f.name, f.type),
            )
        )

    return descriptors


__all__ = ["ENV_TAG", "FieldDescriptor", "collect_fields", "env_field", "is_dataclass_instance"]
