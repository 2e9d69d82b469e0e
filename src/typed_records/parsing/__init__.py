"""Parsing module for the shape definition DSL."""

from typed_records.parsing.shape_parser import ShapeParser

__all__ = [
    "ShapeParser",
]
