"""Parser for the shape definition DSL.

Each shape declared in the DSL becomes a generated dataclass and is
registered, with its resolved field descriptors, in a ShapeRegistry.
"""

from __future__ import annotations

import dataclasses
import keyword
from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from typed_records.parsing.shape_lexer import ShapeLexer
from typed_records.resolver import build_shape
from typed_records.types import ShapeRegistry

# Built-in type names and the Python annotation each one generates
BUILTIN_TYPES: dict[str, type] = {
    "int": int,
    "int8": int,
    "int16": int,
    "int32": int,
    "int64": int,
    "int128": int,
    "uint8": int,
    "uint16": int,
    "uint32": int,
    "uint64": int,
    "uint128": int,
    "string": str,
    "text": str,
    "bool": bool,
    "boolean": bool,
    "float": float,
    "float32": float,
    "float64": float,
}


@dataclass
class TypeRef:
    """Reference to a type, possibly as an array."""

    name: str
    is_array: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.name}[]" if self.is_array else self.name


@dataclass
class FieldSpec:
    """Specification for a field before resolution."""

    name: str
    type_ref: TypeRef | None = None  # None means type name matches field name


@dataclass
class ShapeSpec:
    """Specification for a shape before resolution."""

    name: str
    fields: list[FieldSpec]


@dataclass
class AliasSpec:
    """Specification for an alias before resolution."""

    name: str
    base_type_ref: TypeRef


class ShapeParser:
    """Parser for the shape definition DSL."""

    tokens = ShapeLexer.tokens

    def __init__(self, module: str = "schema") -> None:
        """Initialize the parser.

        Args:
            module: Module name given to generated record classes.
        """
        self.module = module
        self.lexer = ShapeLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.registry: ShapeRegistry = ShapeRegistry()
        self._aliases: dict[str, TypeRef] = {}
        self._shapes: dict[str, ShapeSpec] = {}
        self._generated: dict[str, type] = {}
        self._generating: set[str] = set()

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : statement_list"""
        p[0] = p[1]

    def p_schema_empty(self, p: yacc.YaccProduction) -> None:
        """schema :"""
        p[0] = []

    def p_statement_list_single(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement"""
        p[0] = [p[1]]

    def p_statement_list_multiple(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement_list statement"""
        p[0] = p[1] + [p[2]]

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : alias_def
                     | shape_def"""
        p[0] = p[1]

    def p_alias_def(self, p: yacc.YaccProduction) -> None:
        """alias_def : DEFINE IDENTIFIER AS type_ref"""
        p[0] = AliasSpec(name=p[2], base_type_ref=p[4])

    def p_shape_def(self, p: yacc.YaccProduction) -> None:
        """shape_def : IDENTIFIER LBRACE field_list RBRACE
                     | IDENTIFIER LBRACE field_list COMMA RBRACE"""
        p[0] = ShapeSpec(name=p[1], fields=p[3])

    def p_shape_def_empty(self, p: yacc.YaccProduction) -> None:
        """shape_def : IDENTIFIER LBRACE RBRACE"""
        p[0] = ShapeSpec(name=p[1], fields=[])

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field
                      | field_list field"""
        p[0] = p[1] + [p[len(p) - 1]]

    def p_field_with_type(self, p: yacc.YaccProduction) -> None:
        """field : IDENTIFIER COLON type_ref"""
        p[0] = FieldSpec(name=p[1], type_ref=p[3])

    def p_field_implicit_type(self, p: yacc.YaccProduction) -> None:
        """field : IDENTIFIER"""
        p[0] = FieldSpec(name=p[1], type_ref=None)

    def p_type_ref_simple(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER"""
        p[0] = TypeRef(name=p[1], is_array=False)

    def p_type_ref_array(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER LBRACKET RBRACKET"""
        p[0] = TypeRef(name=p[1], is_array=True)

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> ShapeRegistry:
        """Parse shape definitions and return a populated ShapeRegistry."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.registry = ShapeRegistry()
        self._aliases = {}
        self._shapes = {}
        self._generated = {}
        self._generating = set()

        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        for spec in specs or []:
            self._declare(spec)

        for spec in self._shapes.values():
            self._generate_shape(spec)

        # Register in declaration order, whatever order generation took
        for name in self._shapes:
            self.registry.register(build_shape(self._generated[name]))

        return self.registry

    def _declare(self, spec: AliasSpec | ShapeSpec) -> None:
        """Record a top-level name, rejecting duplicates and built-in names."""
        if spec.name in BUILTIN_TYPES:
            raise ValueError(f"Cannot redefine built-in type '{spec.name}'")
        if spec.name in self._aliases or spec.name in self._shapes:
            raise ValueError(f"Type '{spec.name}' is already defined")
        if isinstance(spec, AliasSpec):
            self._aliases[spec.name] = spec.base_type_ref
        else:
            self._shapes[spec.name] = spec

    def _generate_shape(self, spec: ShapeSpec) -> type | None:
        """Generate the record class for a shape.

        Shapes referenced by field types are generated first. Returns None
        while the shape is still being generated (a reference cycle).
        """
        if spec.name in self._generated:
            return self._generated[spec.name]
        if spec.name in self._generating:
            return None
        if not spec.fields:
            raise ValueError(f"Shape '{spec.name}' declares no fields")

        self._generating.add(spec.name)
        seen: set[str] = set()
        class_fields = []
        for field_spec in spec.fields:
            if keyword.iskeyword(field_spec.name):
                raise ValueError(f"Field name '{field_spec.name}' in shape '{spec.name}' is reserved")
            if field_spec.name in seen:
                raise ValueError(f"Field '{field_spec.name}' is duplicated in shape '{spec.name}'")
            seen.add(field_spec.name)

            type_ref = field_spec.type_ref or TypeRef(name=field_spec.name)
            annotation = self._resolve_type_ref(type_ref, spec.name, field_spec.name)
            class_fields.append(
                (
                    field_spec.name,
                    annotation,
                    dataclasses.field(metadata={"type_name": type_ref.display_name}),
                )
            )

        record_type = dataclasses.make_dataclass(spec.name, class_fields)
        record_type.__module__ = self.module
        self._generating.discard(spec.name)
        self._generated[spec.name] = record_type
        return record_type

    def _resolve_type_ref(self, type_ref: TypeRef, shape_name: str, field_name: str) -> Any:
        """Resolve a type reference to the annotation of the generated field.

        Shape references resolve to the referenced record class, or to
        ``object`` when the reference closes a cycle.
        """
        annotation = self._resolve_name(type_ref.name, shape_name, field_name, set())
        if type_ref.is_array:
            return list
        return annotation

    def _resolve_name(self, name: str, shape_name: str, field_name: str, visiting: set[str]) -> Any:
        if name in BUILTIN_TYPES:
            return BUILTIN_TYPES[name]
        if name in self._shapes:
            record_type = self._generate_shape(self._shapes[name])
            return record_type if record_type is not None else object
        if name in self._aliases:
            if name in visiting:
                raise ValueError(f"Alias '{name}' refers to itself")
            visiting.add(name)
            base = self._aliases[name]
            annotation = self._resolve_name(base.name, shape_name, field_name, visiting)
            return list if base.is_array else annotation
        raise ValueError(f"Unknown type '{name}' for field '{field_name}' in shape '{shape_name}'")
