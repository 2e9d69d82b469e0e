"""Render records as SQL-style insert statements.

Each field is formatted by a rule chosen from its kind:

    integer  ->  12, -7
    text     ->  "Tom"        (no escaping of embedded quotes)
    boolean  ->  true, false

A record with any field of another kind is not rendered at all.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from typed_records.errors import KindMismatchError, RecordError, UnsupportedFieldKindError
from typed_records.resolver import record_instance, resolve_shape
from typed_records.types import FieldDescriptor, FieldKind, FieldValue, ShapeRegistry

logger = structlog.get_logger(__name__)


@dataclass
class RenderResult:
    """Outcome of rendering one record: a statement or the error preventing it."""

    record: Any
    statement: str | None = None
    error: RecordError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _format_integer(descriptor: FieldDescriptor, value: Any) -> str:
    _expect(descriptor, value)
    return f"{value:d}"


def _format_text(descriptor: FieldDescriptor, value: Any) -> str:
    _expect(descriptor, value)
    return f'"{value}"'


def _format_boolean(descriptor: FieldDescriptor, value: Any) -> str:
    _expect(descriptor, value)
    return "true" if value else "false"


FORMATTERS: dict[FieldKind, Callable[[FieldDescriptor, Any], str]] = {
    FieldKind.INTEGER: _format_integer,
    FieldKind.TEXT: _format_text,
    FieldKind.BOOLEAN: _format_boolean,
}


def format_field(descriptor: FieldDescriptor, value: Any) -> str:
    """Format one field value as a literal.

    Raises:
        UnsupportedFieldKindError: If no rule exists for the field's kind.
        KindMismatchError: If the live value does not match the field's kind.
    """
    formatter = FORMATTERS.get(descriptor.kind)
    if formatter is None:
        raise UnsupportedFieldKindError(descriptor.name, descriptor.type_name)
    return formatter(descriptor, value)


def render(record: Any, registry: ShapeRegistry | None = None) -> str:
    """Render a record as ``insert into <Name> values(<v1>, <v2>, ...)``.

    Values are positional, in field declaration order.

    Args:
        record: A record or a MutableRef to one.
        registry: Registry used to cache shapes.

    Returns:
        The complete statement.

    Raises:
        UnsupportedShapeError: If the value is not a flat record instance.
        UnsupportedFieldKindError: If any field has an unsupported kind. Checked
            for every field before any value is read.
        KindMismatchError: If a live value does not match its field's kind.
    """
    shape = resolve_shape(record, registry)
    target = record_instance(record)
    for f in shape.fields:
        if f.kind not in FORMATTERS:
            raise UnsupportedFieldKindError(f.name, f.type_name)

    literals = [format_field(f, f.read(target)) for f in shape.fields]
    statement = f"insert into {shape.name} values({', '.join(literals)})"

    logger.debug("record_rendered", shape=shape.name, fields=len(literals))
    return statement


def render_all(records: Iterable[Any], registry: ShapeRegistry | None = None) -> list[RenderResult]:
    """Render many records, collecting a result for each instead of stopping at the first error."""
    results = []
    for record in records:
        try:
            results.append(RenderResult(record, statement=render(record, registry)))
        except RecordError as e:
            logger.debug("record_render_failed", error=str(e))
            results.append(RenderResult(record, error=e))
    return results


def _expect(descriptor: FieldDescriptor, value: Any) -> None:
    actual = FieldValue.of(value).kind
    if actual is not descriptor.kind:
        raise KindMismatchError(descriptor.name, descriptor.kind, actual)
