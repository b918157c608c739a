"""
Schema node definitions.

A SchemaNode is the normalized form of a JSON Schema that the visitor walks.
References are kept by name and resolved against ``definitions`` on lookup,
so self-referencing schemas never expand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SchemaKind(str, Enum):
    """The closed set of node kinds the visitor dispatches on."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"
    CUSTOM_TYPE = "customType"


@dataclass
class SchemaNode:
    """A node of a normalized JSON Schema."""

    kind: SchemaKind

    # Object properties, in declaration order
    properties: dict[str, SchemaNode] = field(default_factory=dict)

    # Array item schema
    items: SchemaNode | None = None

    # Names of required properties
    required: frozenset[str] = frozenset()

    # Name of the referenced definition (customType only, None when anonymous)
    ref: str | None = None

    # Allowed values, if the schema restricts them
    enum: tuple[Any, ...] = ()

    # Named definitions declared by this schema
    definitions: dict[str, SchemaNode] = field(default_factory=dict)

    # True for JSON "integer" numbers
    integer: bool = False

    # Original location in the schema (for error messages)
    source_path: str = ""

    @property
    def is_anonymous(self) -> bool:
        """Whether this is an inline composite type with no name."""
        return self.kind is SchemaKind.CUSTOM_TYPE and self.ref is None

    @staticmethod
    def empty_object() -> SchemaNode:
        return SchemaNode(kind=SchemaKind.OBJECT)
