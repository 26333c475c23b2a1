"""Map decoded configuration trees onto target types.

Source keys are matched against the target's fields case-insensitively,
so ``databaseConfig``, ``DatabaseConfig`` and ``databaseconfig`` all fill
the same field. A dataclass field can name its source key explicitly with
``field(metadata={"key": "databaseConfig"})``; pydantic models use their
field ``alias``. Type coercion and validation are delegated to pydantic.
"""

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError

from .exceptions import ConfigValidationError
from .utils import deep_merge
from .utils import find_key

FIELD_KEY = "key"

_MISSING = object()
_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)


@dataclass(frozen=True)
class FieldSpec:
    """One field of a target type.

    Attributes:
        name: Key the field is validated under
        key: Key looked up in the source tree
        annotation: Declared type with ``Optional`` removed
        nested: Struct type of the field, if it is one
    """

    name: str
    key: str
    annotation: Any
    nested: type | None = None


def is_struct(target: Any) -> bool:
    """Whether fields of ``target`` are mapped key by key."""
    if not isinstance(target, type):
        return False
    return dataclasses.is_dataclass(target) or issubclass(target, BaseModel)


def struct_fields(target: type) -> list[FieldSpec]:
    """List the fields of a dataclass or pydantic model."""
    specs = []
    if issubclass(target, BaseModel):
        for name, info in target.model_fields.items():
            key = info.alias or name
            annotation = _unwrap_optional(info.annotation)
            specs.append(FieldSpec(key, key, annotation, annotation if is_struct(annotation) else None))
        return specs

    hints = typing.get_type_hints(target)
    for f in dataclasses.fields(target):
        if not f.init:
            continue
        annotation = _unwrap_optional(hints.get(f.name, Any))
        key = f.metadata.get(FIELD_KEY, f.name)
        specs.append(FieldSpec(f.name, key, annotation, annotation if is_struct(annotation) else None))
    return specs


def normalize(data: Mapping[str, Any], target: Any) -> Any:
    """Re-key ``data`` by the target's field names, dropping unknown keys.

    Structs held in lists, tuples and dict values are re-keyed as well.
    """
    if not is_struct(target):
        return data

    result: dict[str, Any] = {}
    for info in struct_fields(target):
        value = find_key(data, info.key, _MISSING)
        if value is _MISSING:
            continue
        result[info.name] = _normalize_value(value, info.annotation)
    return result


def env_overlay(
    target: Any,
    prefix: list[str],
    delimiter: str,
    environ: Mapping[str, str],
    _seen: frozenset = frozenset(),
) -> dict[str, Any]:
    """Collect environment values for every leaf field of ``target``.

    The variable for a leaf is its key path joined with ``delimiter`` and
    upper-cased, e.g. ``DATABASECONFIG_HOST`` for ``databaseConfig.host``.

    Args:
        target: Target type
        prefix: Key segments preceding the target's own fields
        delimiter: Separator between key segments
        environ: Environment mapping to read from

    Returns:
        Nested dictionary keyed like ``normalize`` output
    """
    overlay: dict[str, Any] = {}
    if not is_struct(target):
        return overlay

    seen = _seen | {target}
    for info in struct_fields(target):
        segments = [*prefix, info.key]
        if info.nested is not None and info.nested not in seen:
            nested = env_overlay(info.nested, segments, delimiter, environ, seen)
            if nested:
                overlay[info.name] = nested
            continue

        variable = delimiter.join(segments).upper()
        if variable not in environ:
            continue
        value: Any = environ[variable]
        if typing.get_origin(info.annotation) in _SEQUENCE_ORIGINS or info.annotation in _SEQUENCE_ORIGINS:
            value = value.split()
        overlay[info.name] = value
    return overlay


def unmarshal(data: Mapping[str, Any], target: Any, overlay: dict[str, Any] | None = None) -> Any:
    """Build a ``target`` instance from a decoded tree.

    Args:
        data: Decoded configuration tree
        target: Type to build
        overlay: Values merged over ``data`` after re-keying

    Returns:
        Validated instance of ``target``

    Raises:
        ConfigValidationError: If the data does not fit the target
    """
    normalized = normalize(data, target)
    if overlay:
        normalized = deep_merge(dict(normalized), overlay)

    try:
        return _adapter(target).validate_python(normalized)
    except ValidationError as e:
        raise ConfigValidationError(f"failed to unmarshal config into {_type_name(target)}: {e}") from e


@functools.lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _normalize_value(value: Any, annotation: Any) -> Any:
    annotation = _unwrap_optional(annotation)
    if is_struct(annotation):
        return normalize(value, annotation) if isinstance(value, Mapping) else value

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if not args:
        return value

    if origin in _MAPPING_ORIGINS and len(args) == 2 and isinstance(value, Mapping):
        return {k: _normalize_value(v, args[1]) for k, v in value.items()}

    if origin in (*_SEQUENCE_ORIGINS, Sequence) and isinstance(value, (list, tuple)):
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            return [_normalize_value(v, arg) for v, arg in zip(value, args)] + list(value[len(args) :])
        return [_normalize_value(v, args[0]) for v in value]

    return value


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))
