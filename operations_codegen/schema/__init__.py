"""
Normalized JSON Schema representation, parser and visitor.
"""

from __future__ import annotations

from .nodes import SchemaKind, SchemaNode
from .parser import SchemaParser, parse_schema
from .visitor import FieldEvent, SchemaVisitor, visit_schema

__all__ = [
    "SchemaKind",
    "SchemaNode",
    "SchemaParser",
    "parse_schema",
    "FieldEvent",
    "SchemaVisitor",
    "visit_schema",
]
