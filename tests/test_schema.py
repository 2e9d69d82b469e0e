"""Tests for the Schema class."""

import shutil
import tempfile
from pathlib import Path

import pytest

from typed_records.accessor import get_field, mutable, set_field
from typed_records.errors import KindMismatchError, NotAddressableError, UnsupportedFieldKindError
from typed_records.schema import Schema
from typed_records.types import FieldValue

SHAPES = """
# Shapes used by the reflection examples
Person {
    Name: string
    Age: int
}

Employee {
    ID: int
    Name: string
    Position: string
    Country: string
    Salary: int
}

Reading {
    Sensor: string
    Value: float64
}
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def schema():
    return Schema.parse(SHAPES)


class TestSchema:
    """Tests for Schema."""

    def test_list_shapes(self, schema):
        """Test shapes are listed in declaration order."""
        assert schema.list_shapes() == ["Person", "Employee", "Reading"]
        assert "Person" in schema
        assert "Manager" not in schema

    def test_get_shape(self, schema):
        """Test shape lookup."""
        assert schema.get_shape("Person").field_names == ["Name", "Age"]
        with pytest.raises(KeyError):
            schema.get_shape("Manager")

    def test_create_record(self, schema):
        """Test creating records by shape name."""
        by_name = schema.create_record("Person", {"Name": "Samantha", "Age": 29})
        by_position = schema.create_record("Person", ["Samantha", 29])

        assert by_name == by_position
        assert isinstance(by_name, schema.record_type("Person"))

    def test_create_record_kind_mismatch(self, schema):
        """Test that values are kind-checked."""
        with pytest.raises(KindMismatchError):
            schema.create_record("Person", ["Samantha", "29"])

    def test_render_employee(self, schema):
        """Test rendering a record generated from the DSL."""
        e = schema.create_record(
            "Employee", [12, "Tom", "Technical Leader", "South Africa", 23401910]
        )
        expected = (
            'insert into Employee values(12, "Tom", "Technical Leader", "South Africa", 23401910)'
        )
        assert schema.render(e) == expected

    def test_render_person(self, schema):
        """Test rendering the Samantha record."""
        p = schema.create_record("Person", {"Name": "Samantha", "Age": 29})
        assert schema.render(p) == 'insert into Person values("Samantha", 29)'

    def test_render_unsupported(self, schema):
        """Test that a float field prevents rendering."""
        r = schema.create_record("Reading", ["s1", 21.5])
        with pytest.raises(UnsupportedFieldKindError):
            schema.render(r)

    def test_mutation(self, schema):
        """Test mutating a generated record through a reference."""
        p = schema.create_record("Person", ["Bob", 35])

        with pytest.raises(NotAddressableError):
            set_field(p, "Name", "Will")
        assert get_field(p, "Name") == FieldValue.text("Bob")

        ref = mutable(p, schema.registry)
        set_field(ref, "Name", "Will", schema.registry)
        set_field(ref, "Age", 54, schema.registry)
        assert schema.render(p) == 'insert into Person values("Will", 54)'

    def test_shape_of(self, schema):
        """Test resolving a record through the schema registry."""
        p = schema.create_record("Person", ["Bob", 35])
        assert schema.shape_of(p) is schema.get_shape("Person")

    def test_load(self, temp_dir):
        """Test loading shapes from a file."""
        path = temp_dir / "reflection.ttr"
        path.write_text(SHAPES, encoding="utf-8")

        schema = Schema.load(path)
        assert schema.get_shape("Person").qualified_name == "reflection.Person"
        assert Schema.load(str(path), module="hr").get_shape("Person").qualified_name == "hr.Person"
