"""Read and write individual record fields.

Reading works on any record. Writing needs a MutableRef obtained from
mutable(); a bare record is treated as a copy and cannot be written.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from typed_records.errors import KindMismatchError, NotAddressableError, UnsupportedShapeError
from typed_records.resolver import record_instance, resolve_shape, unwrap
from typed_records.types import FieldValue, MutableRef, Shape, ShapeRegistry

logger = structlog.get_logger(__name__)


def mutable(record: Any, registry: ShapeRegistry | None = None) -> MutableRef:
    """Grant the mutable capability over ``record``.

    Raises:
        NotAddressableError: If records of this shape cannot change in place
            (NamedTuples, frozen dataclasses).
        UnsupportedShapeError: If ``record`` is not a record.
    """
    if isinstance(record, MutableRef):
        return record
    if isinstance(record, type):
        raise UnsupportedShapeError(record, "expected a record instance, not a type")
    shape = resolve_shape(record, registry)
    if not shape.mutable:
        raise NotAddressableError(record, f"records of shape '{shape.name}' are immutable")
    return MutableRef(record)


def get_field(
    record: Any, key: int | str, registry: ShapeRegistry | None = None
) -> FieldValue:
    """Get the tagged value of one field.

    Args:
        record: A record or a MutableRef to one.
        key: Field position (0-based) or field name.

    Raises:
        UnsupportedShapeError: If ``record`` is not a record instance.
        UnknownFieldError: If the shape has no such field.
    """
    descriptor = resolve_shape(record, registry).field(key)
    return FieldValue(descriptor.kind, descriptor.read(record_instance(record)))


def set_field(
    ref: MutableRef, key: int | str, value: Any, registry: ShapeRegistry | None = None
) -> None:
    """Overwrite one field of the record behind ``ref`` in place.

    Args:
        ref: MutableRef to the record to change.
        key: Field position (0-based) or field name.
        value: A FieldValue, or a raw value whose kind is inferred.

    Raises:
        NotAddressableError: If ``ref`` is not a MutableRef to a mutable record.
        KindMismatchError: If the value's kind, or the kind of a FieldValue's
            payload, differs from the field's kind.
        UnknownFieldError: If the shape has no such field.
    """
    shape = _writable_shape(ref, registry)
    descriptor = shape.field(key)
    tagged = FieldValue.of(value)
    # The tag of a hand-built FieldValue is not trusted; the payload decides
    actual = FieldValue.of(tagged.value).kind
    if not descriptor.kind.is_supported or tagged.kind is not descriptor.kind:
        raise KindMismatchError(descriptor.name, descriptor.kind, tagged.kind)
    if actual is not descriptor.kind:
        raise KindMismatchError(descriptor.name, descriptor.kind, actual)

    setattr(ref.record, descriptor.name, tagged.value)
    logger.debug("field_set", shape=shape.name, field=descriptor.name)


def assign(ref: MutableRef, source: Any, registry: ShapeRegistry | None = None) -> None:
    """Overwrite every field of the record behind ``ref`` with those of ``source``.

    All values are checked before any field is written.

    Raises:
        NotAddressableError: If ``ref`` is not a MutableRef to a mutable record.
        KindMismatchError: If ``source`` has a different shape.
    """
    shape = _writable_shape(ref, registry)
    source_shape = resolve_shape(source, registry)
    if source_shape.record_type is not shape.record_type:
        raise KindMismatchError(shape.name, shape.name, source_shape.name)

    target = record_instance(source)
    values = [f.read(target) for f in shape.fields]
    for descriptor, value in zip(shape.fields, values):
        descriptor.check(value)
    for descriptor, value in zip(shape.fields, values):
        setattr(ref.record, descriptor.name, value)
    logger.debug("record_assigned", shape=shape.name)


def new_instance(
    prototype: Any,
    values: Mapping[str, Any] | Sequence[Any] | None = None,
    registry: ShapeRegistry | None = None,
) -> Any:
    """Create a new record with the same shape as ``prototype``.

    Args:
        prototype: A record, a MutableRef or a record type.
        values: Field values by name or in declaration order. When omitted,
            the prototype instance's values are copied.

    Returns:
        The new record. The prototype is left untouched.
    """
    shape = resolve_shape(prototype, registry)
    if values is None:
        target = unwrap(prototype)
        if isinstance(target, type):
            raise ValueError(f"Values are required to create a new '{shape.name}' from its type")
        values = [f.read(target) for f in shape.fields]
    return shape.build(values)


def _writable_shape(ref: Any, registry: ShapeRegistry | None) -> Shape:
    if not isinstance(ref, MutableRef):
        raise NotAddressableError(ref)
    shape = resolve_shape(ref, registry)
    if not shape.mutable or isinstance(ref.record, type):
        raise NotAddressableError(ref.record, f"records of shape '{shape.name}' are immutable")
    return shape
