"""Typed Records - introspect, mutate and render flat typed records."""

from typed_records.accessor import assign, get_field, mutable, new_instance, set_field
from typed_records.errors import (
    KindMismatchError,
    NotAddressableError,
    RecordError,
    UnknownFieldError,
    UnsupportedFieldKindError,
    UnsupportedShapeError,
)
from typed_records.parsing import ShapeParser
from typed_records.render import RenderResult, render, render_all
from typed_records.resolver import RecordInfo, classify, describe, resolve, resolve_shape
from typed_records.schema import Schema
from typed_records.types import (
    FieldDescriptor,
    FieldKind,
    FieldValue,
    MutableRef,
    Shape,
    ShapeRegistry,
)

__all__ = [
    # Main API
    "Schema",
    "ShapeParser",
    "resolve",
    "resolve_shape",
    "describe",
    "classify",
    "render",
    "render_all",
    "RenderResult",
    "RecordInfo",
    # Field access
    "mutable",
    "get_field",
    "set_field",
    "assign",
    "new_instance",
    # Types
    "FieldDescriptor",
    "FieldKind",
    "FieldValue",
    "MutableRef",
    "Shape",
    "ShapeRegistry",
    # Errors
    "RecordError",
    "UnsupportedShapeError",
    "UnsupportedFieldKindError",
    "NotAddressableError",
    "KindMismatchError",
    "UnknownFieldError",
]

__version__ = "0.1.0"
