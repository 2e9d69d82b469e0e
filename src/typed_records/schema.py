"""Schema class for working with shapes declared in the DSL."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from typed_records.parsing import ShapeParser
from typed_records.render import render
from typed_records.resolver import resolve_shape
from typed_records.types import Shape, ShapeRegistry


class Schema:
    """Parsed shape definitions and the record classes generated for them."""

    def __init__(self, registry: ShapeRegistry) -> None:
        """Initialize a schema.

        Args:
            registry: Shape registry with all shape definitions.
        """
        self.registry = registry

    @classmethod
    def parse(cls, shape_definitions: str, module: str = "schema") -> Schema:
        """Parse shape definitions and create a schema.

        Args:
            shape_definitions: DSL string defining shapes.
            module: Module name given to the generated record classes.

        Returns:
            A new Schema instance.
        """
        parser = ShapeParser(module=module)
        return cls(parser.parse(shape_definitions))

    @classmethod
    def load(cls, path: Path | str, module: str | None = None) -> Schema:
        """Parse shape definitions from a file.

        The module name defaults to the file's stem.
        """
        if isinstance(path, str):
            path = Path(path)
        return cls.parse(path.read_text(encoding="utf-8"), module=module or path.stem)

    def get_shape(self, name: str) -> Shape:
        """Get a shape by name.

        Raises:
            KeyError: If the shape is not found.
        """
        return self.registry.get_or_raise(name)

    def list_shapes(self) -> list[str]:
        """List all shape names in declaration order."""
        return self.registry.list_shapes()

    def record_type(self, name: str) -> type:
        """Get the record class generated for a shape."""
        return self.get_shape(name).record_type

    def create_record(self, shape_name: str, values: Mapping[str, Any] | Sequence[Any]) -> Any:
        """Create a record of a shape.

        Args:
            shape_name: Name of the shape to instantiate.
            values: Field values by name (dict) or in declaration order (list/tuple).

        Returns:
            A new record.
        """
        return self.get_shape(shape_name).build(values)

    def shape_of(self, record: Any) -> Shape:
        """Resolve a record's shape through this schema's registry."""
        return resolve_shape(record, self.registry)

    def render(self, record: Any) -> str:
        """Render a record as an insert statement."""
        return render(record, self.registry)

    def __contains__(self, name: str) -> bool:
        return name in self.registry
