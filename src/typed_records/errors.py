"""Exceptions raised by the typed_records library."""

from __future__ import annotations

from typing import Any


class RecordError(Exception):
    """Base class for all record introspection and rendering errors."""


class UnsupportedShapeError(RecordError, TypeError):
    """Raised when a value is not a flat aggregate of named fields."""

    def __init__(self, value: Any, reason: str = "not a record") -> None:
        self.type_name = value.__name__ if isinstance(value, type) else type(value).__name__
        self.reason = reason
        super().__init__(f"Unsupported shape '{self.type_name}': {reason}")


class UnsupportedFieldKindError(RecordError, TypeError):
    """Raised when a field's kind has no formatting rule."""

    def __init__(self, name: str, type_name: str) -> None:
        self.name = name
        self.type_name = type_name
        super().__init__(f"Unsupported kind for field '{name}' (declared as {type_name})")


class NotAddressableError(RecordError, TypeError):
    """Raised when mutation is attempted without a mutable reference."""

    def __init__(self, value: Any, reason: str = "pass it through mutable() first") -> None:
        self.type_name = type(value).__name__
        super().__init__(f"Value of type '{self.type_name}' is not addressable: {reason}")


class KindMismatchError(RecordError, TypeError):
    """Raised when a value's kind does not match the field's declared kind."""

    def __init__(self, name: str, expected: Any, actual: Any) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"'{name}' expects {_kind_label(expected)}, got {_kind_label(actual)}"
        )


class UnknownFieldError(RecordError, LookupError):
    """Raised when a field position or name does not exist in a shape."""

    def __init__(self, shape_name: str, key: int | str) -> None:
        self.shape_name = shape_name
        self.key = key
        what = "position" if isinstance(key, int) else "field"
        super().__init__(f"Shape '{shape_name}' has no {what} {key!r}")


def _kind_label(kind: Any) -> str:
    return getattr(kind, "value", str(kind))
