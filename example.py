"""Example usage of the typed_records library."""

from dataclasses import dataclass

from typed_records import (
    NotAddressableError,
    Schema,
    UnsupportedFieldKindError,
    describe,
    get_field,
    mutable,
    render,
    resolve,
    set_field,
)


@dataclass
class Person:
    Name: str
    Age: int


@dataclass
class Measurement:
    Label: str
    Value: float


# Introspect a plain dataclass
p = Person("Bob", 35)
info = describe(p)
print(f"{info.qualified_name} -> {info.text}")
for f in resolve(p):
    print(f"  [{f.position}] {f.name}: {f.type_name} ({f.kind.value}) = {get_field(p, f.position).value!r}")

# Mutation needs an explicit mutable reference
try:
    set_field(p, "Name", "Will")
except NotAddressableError as e:
    print(f"\nRefused: {e}")

ref = mutable(p)
set_field(ref, "Name", "Will")
set_field(ref, "Age", 54)
print(f"After mutation: {describe(ref).text}")

# Render records as insert statements
print("\n" + render(Person("Samantha", 29)))
try:
    render(Measurement("temp", 21.5))
except UnsupportedFieldKindError as e:
    print(f"Not rendered: {e}")

# Shapes can also be declared in the DSL
shapes = """
define money as uint64

Employee {
    ID: int
    Name: string
    Position: string
    Country: string
    Salary: money
}
"""

schema = Schema.parse(shapes, module="reflection")
employee = schema.create_record(
    "Employee",
    {
        "ID": 12,
        "Name": "Tom",
        "Position": "Technical Leader",
        "Country": "South Africa",
        "Salary": 23401910,
    },
)
print(schema.render(employee))
