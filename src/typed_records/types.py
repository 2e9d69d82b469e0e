"""Shape, field and value types for the typed_records library."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from typed_records.errors import KindMismatchError, UnknownFieldError


class FieldKind(Enum):
    """Primitive kinds a field can be classified as."""

    INTEGER = "integer"
    TEXT = "text"
    BOOLEAN = "boolean"
    UNSUPPORTED = "unsupported"

    @property
    def is_supported(self) -> bool:
        """Return whether values of this kind can be read, written and rendered."""
        return self is not FieldKind.UNSUPPORTED


@dataclass(frozen=True)
class FieldValue:
    """A primitive value tagged with its kind."""

    kind: FieldKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> FieldValue:
        """Wrap a raw Python value, inferring its kind.

        bool is checked before int since it is an int subclass.
        """
        if isinstance(value, FieldValue):
            return value
        if isinstance(value, bool):
            return cls(FieldKind.BOOLEAN, value)
        if isinstance(value, int) and not isinstance(value, Enum):
            return cls(FieldKind.INTEGER, value)
        if isinstance(value, str) and not isinstance(value, Enum):
            return cls(FieldKind.TEXT, value)
        return cls(FieldKind.UNSUPPORTED, value)

    @classmethod
    def integer(cls, value: int) -> FieldValue:
        return cls(FieldKind.INTEGER, value)

    @classmethod
    def text(cls, value: str) -> FieldValue:
        return cls(FieldKind.TEXT, value)

    @classmethod
    def boolean(cls, value: bool) -> FieldValue:
        return cls(FieldKind.BOOLEAN, value)


@dataclass(frozen=True)
class FieldDescriptor:
    """Describes one field of a shape."""

    name: str
    kind: FieldKind
    position: int
    type_name: str

    def read(self, record: Any) -> Any:
        """Return the raw value stored in this field of ``record``."""
        return getattr(record, self.name)

    def check(self, value: Any) -> FieldValue:
        """Tag ``value`` and verify it fits this field.

        Fields of an unsupported kind accept any value here; they are
        rejected later by consumers that need to format or mutate them.

        Raises:
            KindMismatchError: If the value's kind differs from the field's kind.
        """
        tagged = FieldValue.of(value)
        if self.kind.is_supported and tagged.kind is not self.kind:
            raise KindMismatchError(self.name, self.kind, tagged.kind)
        return tagged


@dataclass(frozen=True)
class Shape:
    """The declared structure shared by all records of one type."""

    name: str
    qualified_name: str
    record_type: type
    fields: tuple[FieldDescriptor, ...]
    mutable: bool = True

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, key: int | str) -> FieldDescriptor:
        """Get a field descriptor by position or by name.

        Raises:
            UnknownFieldError: If no such field exists.
        """
        if isinstance(key, str):
            for f in self.fields:
                if f.name == key:
                    return f
        elif isinstance(key, int) and not isinstance(key, bool):
            if 0 <= key < len(self.fields):
                return self.fields[key]
        raise UnknownFieldError(self.name, key)

    def build(self, values: Mapping[str, Any] | list[Any] | tuple[Any, ...]) -> Any:
        """Create a new record of this shape.

        Args:
            values: Field values, either a mapping by name or a list or tuple in
                declaration order.

        Returns:
            A new instance of ``record_type``.

        Raises:
            UnknownFieldError: If a mapping names a field the shape lacks.
            ValueError: If ``values`` is neither a mapping, a list nor a tuple,
                a value is missing or the count is wrong.
            KindMismatchError: If a value does not fit its field.
        """
        if isinstance(values, Mapping):
            for key in values:
                if key not in self.field_names:
                    raise UnknownFieldError(self.name, key)
            missing = [name for name in self.field_names if name not in values]
            if missing:
                raise ValueError(f"Missing values for {self.name}: {', '.join(missing)}")
            ordered = [values[name] for name in self.field_names]
        elif isinstance(values, (list, tuple)):
            ordered = list(values)
            if len(ordered) != len(self.fields):
                raise ValueError(
                    f"Shape '{self.name}' has {len(self.fields)} fields, got {len(ordered)} values"
                )
        else:
            raise ValueError(
                f"Values for {self.name} must be a mapping, list or tuple, not {type(values).__name__}"
            )

        for descriptor, value in zip(self.fields, ordered):
            descriptor.check(value)
        # Keywords, so dataclasses declared with kw_only=True build too
        return self.record_type(**dict(zip(self.field_names, ordered)))

    def __len__(self) -> int:
        return len(self.fields)


class MutableRef:
    """Explicit mutable capability over one record.

    Holds the caller's original record, never a copy. Only a MutableRef
    can be passed to the mutating accessor operations.
    """

    __slots__ = ("record",)

    def __init__(self, record: Any) -> None:
        self.record = record

    def __repr__(self) -> str:
        return f"MutableRef({self.record!r})"


class ShapeRegistry:
    """Registry of shapes, by name and by record type."""

    def __init__(self) -> None:
        self._shapes: dict[str, Shape] = {}
        self._by_type: dict[type, Shape] = {}

    def register(self, shape: Shape) -> None:
        """Register a named shape."""
        if shape.name in self._shapes:
            raise ValueError(f"Shape '{shape.name}' is already defined")
        self._shapes[shape.name] = shape
        self._by_type[shape.record_type] = shape

    def cache(self, shape: Shape) -> None:
        """Remember a shape for its record type without claiming its name."""
        self._by_type[shape.record_type] = shape

    def shape_for_type(self, record_type: type) -> Shape | None:
        """Get the cached shape for a record type."""
        return self._by_type.get(record_type)

    def get(self, name: str) -> Shape | None:
        """Get a shape by name."""
        return self._shapes.get(name)

    def get_or_raise(self, name: str) -> Shape:
        """Get a shape by name, raising if not found."""
        shape = self._shapes.get(name)
        if shape is None:
            raise KeyError(f"Shape '{name}' not found")
        return shape

    def list_shapes(self) -> list[str]:
        """List all registered shape names."""
        return list(self._shapes.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._shapes

    def __len__(self) -> int:
        return len(self._shapes)
