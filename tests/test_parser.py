"""Tests for the shape DSL parser."""

import dataclasses

import pytest

from typed_records.parsing import ShapeParser
from typed_records.parsing.shape_lexer import ShapeLexer
from typed_records.types import FieldKind


class TestShapeLexer:
    """Tests for the shape lexer."""

    def test_tokenize_alias(self):
        """Test tokenizing an alias definition."""
        lexer = ShapeLexer()
        lexer.build()

        tokens = lexer.tokenize("define uuid as uint64")
        token_types = [t.type for t in tokens]

        assert token_types == ["DEFINE", "IDENTIFIER", "AS", "IDENTIFIER"]

    def test_tokenize_shape(self):
        """Test tokenizing a shape."""
        lexer = ShapeLexer()
        lexer.build()

        tokens = lexer.tokenize("Person { Name: string, Tags: string[] }")
        token_types = [t.type for t in tokens]

        assert token_types == [
            "IDENTIFIER",
            "LBRACE",
            "IDENTIFIER",
            "COLON",
            "IDENTIFIER",
            "COMMA",
            "IDENTIFIER",
            "COLON",
            "IDENTIFIER",
            "LBRACKET",
            "RBRACKET",
            "RBRACE",
        ]

    def test_comments_and_newlines_ignored(self):
        """Test that comments and newlines produce no tokens."""
        lexer = ShapeLexer()
        lexer.build()

        tokens = lexer.tokenize("# people\nPerson {\n}\n")
        assert [t.type for t in tokens] == ["IDENTIFIER", "LBRACE", "RBRACE"]
        assert tokens[0].lineno == 2

    def test_illegal_character(self):
        """Test error on illegal character."""
        lexer = ShapeLexer()
        lexer.build()

        with pytest.raises(SyntaxError, match="Illegal character '@'"):
            lexer.tokenize("define uuid @ uint64")


class TestShapeParser:
    """Tests for the shape parser."""

    def test_parse_shape(self):
        """Test parsing a simple shape."""
        registry = ShapeParser().parse("Person { Name: string, Age: int }")

        shape = registry.get_or_raise("Person")
        assert shape.field_names == ["Name", "Age"]
        assert [f.kind for f in shape.fields] == [FieldKind.TEXT, FieldKind.INTEGER]
        assert [f.type_name for f in shape.fields] == ["string", "int"]

    def test_generated_class(self):
        """Test that shapes generate mutable dataclasses."""
        registry = ShapeParser(module="reflection").parse("Person { Name: string, Age: int }")
        shape = registry.get_or_raise("Person")

        assert dataclasses.is_dataclass(shape.record_type)
        assert shape.record_type.__name__ == "Person"
        assert shape.qualified_name == "reflection.Person"
        assert shape.mutable is True
        assert shape.record_type("Bob", 35).Age == 35

    def test_commas_optional(self):
        """Test newline-separated fields and trailing commas."""
        registry = ShapeParser().parse(
            """
            Employee {
                ID: int
                Name: string
                Salary: uint64,
            }
            """
        )
        assert registry.get_or_raise("Employee").field_names == ["ID", "Name", "Salary"]

    def test_builtin_kinds(self):
        """Test how built-in type names are classified."""
        registry = ShapeParser().parse(
            "All { a: int8, b: uint128, c: text, d: boolean, e: float64, f: string[] }"
        )
        kinds = [f.kind for f in registry.get_or_raise("All").fields]
        assert kinds == [
            FieldKind.INTEGER,
            FieldKind.INTEGER,
            FieldKind.TEXT,
            FieldKind.BOOLEAN,
            FieldKind.UNSUPPORTED,
            FieldKind.UNSUPPORTED,
        ]
        assert registry.get_or_raise("All").field("f").type_name == "string[]"

    def test_aliases(self):
        """Test that aliases resolve to their base type."""
        registry = ShapeParser().parse(
            """
            define uuid as uint64
            define id as uuid
            define names as string[]
            Item { key: id, labels: names }
            """
        )
        shape = registry.get_or_raise("Item")
        assert shape.field("key").kind is FieldKind.INTEGER
        assert shape.field("key").type_name == "id"
        assert shape.field("labels").kind is FieldKind.UNSUPPORTED
        assert registry.list_shapes() == ["Item"]

    def test_implicit_field_type(self):
        """Test fields whose type name matches the field name."""
        registry = ShapeParser().parse(
            """
            define name as string
            define age as uint8
            Person { name, age }
            """
        )
        shape = registry.get_or_raise("Person")
        assert [f.kind for f in shape.fields] == [FieldKind.TEXT, FieldKind.INTEGER]
        assert [f.type_name for f in shape.fields] == ["name", "age"]

    def test_nested_shapes_unsupported(self):
        """Test that shape-typed fields are classified as unsupported."""
        registry = ShapeParser().parse(
            """
            Team { Name: string, Lead: Person }
            Person { Name: string, Age: int }
            """
        )
        team = registry.get_or_raise("Team")
        assert team.field("Lead").kind is FieldKind.UNSUPPORTED
        assert team.field("Lead").type_name == "Person"
        assert registry.list_shapes() == ["Team", "Person"]

    def test_self_reference(self):
        """Test a shape that refers to itself."""
        registry = ShapeParser().parse("Node { value: int, next: Node }")
        node = registry.get_or_raise("Node")
        assert node.field("next").kind is FieldKind.UNSUPPORTED

    def test_empty_input(self):
        """Test parsing nothing but comments."""
        assert len(ShapeParser().parse("")) == 0
        assert len(ShapeParser().parse("# nothing here\n")) == 0

    def test_parser_reuse(self):
        """Test that each parse starts from an empty registry."""
        parser = ShapeParser()
        parser.parse("A { x: int }")
        registry = parser.parse("B { y: int }")
        assert registry.list_shapes() == ["B"]

    def test_unknown_type(self):
        """Test error on an undefined type name."""
        with pytest.raises(ValueError, match="Unknown type 'money'"):
            ShapeParser().parse("Account { balance: money }")

    def test_duplicate_shape(self):
        """Test error on redefinition."""
        with pytest.raises(ValueError, match="already defined"):
            ShapeParser().parse("A { x: int }\nA { y: int }")

    def test_builtin_redefinition(self):
        """Test that built-in type names cannot be redefined."""
        with pytest.raises(ValueError, match="built-in"):
            ShapeParser().parse("define int as string")

    def test_empty_shape(self):
        """Test error on a shape with no fields."""
        with pytest.raises(ValueError, match="no fields"):
            ShapeParser().parse("Empty { }")

    def test_duplicate_field(self):
        """Test error on repeated field names."""
        with pytest.raises(ValueError, match="duplicated"):
            ShapeParser().parse("A { x: int, x: string }")

    def test_keyword_field(self):
        """Test error on field names that are Python keywords."""
        with pytest.raises(ValueError, match="reserved"):
            ShapeParser().parse("A { class: string }")

    def test_alias_cycle(self):
        """Test error on aliases that refer to each other."""
        with pytest.raises(ValueError, match="refers to itself"):
            ShapeParser().parse("define a as b\ndefine b as a\nX { v: a }")

    def test_syntax_error(self):
        """Test syntax errors report the line."""
        with pytest.raises(SyntaxError, match="line 2"):
            ShapeParser().parse("A { x: int }\nB { : int }")

    def test_syntax_error_at_end(self):
        """Test an unterminated shape."""
        with pytest.raises(SyntaxError, match="end of input"):
            ShapeParser().parse("A { x: int")
