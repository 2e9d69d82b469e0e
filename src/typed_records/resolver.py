"""Resolve records into shapes and ordered field descriptors."""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from typed_records.errors import UnsupportedShapeError
from typed_records.types import FieldDescriptor, FieldKind, MutableRef, Shape, ShapeRegistry

logger = structlog.get_logger(__name__)

# Shapes discovered from plain Python classes, cached per record type
_default_registry = ShapeRegistry()

# Annotations left as strings when type hints cannot be evaluated
_ANNOTATION_NAMES: dict[str, FieldKind] = {
    "int": FieldKind.INTEGER,
    "str": FieldKind.TEXT,
    "bool": FieldKind.BOOLEAN,
}

_UNTYPED = "untyped"


@dataclass(frozen=True)
class RecordInfo:
    """Summary of a record's type and current value."""

    type_name: str
    qualified_name: str
    is_reference: bool
    text: str


def default_registry() -> ShapeRegistry:
    """Return the registry used when no registry is passed explicitly."""
    return _default_registry


def classify(annotation: Any) -> FieldKind:
    """Map a declared field annotation to a field kind."""
    if isinstance(annotation, str):
        return _ANNOTATION_NAMES.get(annotation, FieldKind.UNSUPPORTED)
    if not isinstance(annotation, type) or issubclass(annotation, Enum):
        return FieldKind.UNSUPPORTED
    if issubclass(annotation, bool):
        return FieldKind.BOOLEAN
    if issubclass(annotation, int):
        return FieldKind.INTEGER
    if issubclass(annotation, str):
        return FieldKind.TEXT
    return FieldKind.UNSUPPORTED


def unwrap(value: Any) -> Any:
    """Return the record behind a MutableRef, or the value itself."""
    if isinstance(value, MutableRef):
        return value.record
    return value


def record_instance(record: Any) -> Any:
    """Return the record instance behind ``record``.

    Raises:
        UnsupportedShapeError: If ``record`` is a type rather than an instance.
    """
    target = unwrap(record)
    if isinstance(target, type):
        raise UnsupportedShapeError(target, "expected a record instance, not a type")
    return target


def is_namedtuple_type(record_type: type) -> bool:
    return issubclass(record_type, tuple) and hasattr(record_type, "_fields")


def build_shape(record_type: type) -> Shape:
    """Build the shape of a record type without consulting any cache.

    Dataclasses and NamedTuples are records. Everything else is rejected, as are
    dataclasses with fields the constructor does not set (``init=False``).

    Raises:
        UnsupportedShapeError: If the type is not a record type, has no fields or has
            fields outside the constructor.
    """
    if dataclasses.is_dataclass(record_type):
        declared = [
            (f.name, f.type, f.metadata.get("type_name"))
            for f in dataclasses.fields(record_type)
        ]
        skipped = [f.name for f in dataclasses.fields(record_type) if not f.init]
        if skipped:
            raise UnsupportedShapeError(
                record_type, f"fields not set by the constructor: {', '.join(skipped)}"
            )
        mutable = not record_type.__dataclass_params__.frozen
    elif is_namedtuple_type(record_type):
        raw = getattr(record_type, "__annotations__", {})
        declared = [(name, raw.get(name), None) for name in record_type._fields]
        mutable = False
    else:
        raise UnsupportedShapeError(record_type)

    if not declared:
        raise UnsupportedShapeError(record_type, "record declares no fields")

    hints = _type_hints(record_type)
    fields = []
    for position, (name, raw_annotation, declared_name) in enumerate(declared):
        annotation = hints.get(name, raw_annotation)
        fields.append(
            FieldDescriptor(
                name=name,
                kind=classify(annotation),
                position=position,
                type_name=declared_name or _annotation_name(annotation),
            )
        )

    return Shape(
        name=record_type.__name__,
        qualified_name=f"{record_type.__module__}.{record_type.__qualname__}",
        record_type=record_type,
        fields=tuple(fields),
        mutable=mutable,
    )


def resolve_shape(record: Any, registry: ShapeRegistry | None = None) -> Shape:
    """Resolve the shape of a record, a MutableRef or a record type.

    Args:
        record: The value to introspect.
        registry: Registry used to cache shapes. Defaults to the module registry.

    Returns:
        The record's shape.

    Raises:
        UnsupportedShapeError: If the value is not a flat record.
    """
    if registry is None:
        registry = _default_registry

    target = unwrap(record)
    record_type = target if isinstance(target, type) else type(target)

    shape = registry.shape_for_type(record_type)
    if shape is None:
        shape = build_shape(record_type)
        registry.cache(shape)
        logger.debug("shape_resolved", shape=shape.name, fields=len(shape))
    return shape


def resolve(record: Any, registry: ShapeRegistry | None = None) -> tuple[FieldDescriptor, ...]:
    """Return the record's field descriptors in declaration order."""
    return resolve_shape(record, registry).fields


def describe(record: Any, registry: ShapeRegistry | None = None) -> RecordInfo:
    """Describe a record instance or a MutableRef to one."""
    shape = resolve_shape(record, registry)
    target = record_instance(record)
    is_reference = isinstance(record, MutableRef)

    text = "{" + " ".join(str(f.read(target)) for f in shape.fields) + "}"
    if is_reference:
        text = "&" + text

    return RecordInfo(
        type_name=shape.name,
        qualified_name=shape.qualified_name,
        is_reference=is_reference,
        text=text,
    )


def _type_hints(record_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to the raw annotations
        return {}


def _annotation_name(annotation: Any) -> str:
    if annotation is None:
        return _UNTYPED
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation)
