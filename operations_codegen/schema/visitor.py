"""
Depth-first traversal of SchemaNode trees.

visit_schema() walks a schema and reports what it finds to a SchemaVisitor.
Composite nodes (the root, objects, arrays) produce paired enter/leave
events; leaf nodes (strings, numbers, booleans, any, custom types) produce a
single event. Every event carries a FieldEvent describing the field the node
was reached through.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import UnresolvedReference
from .nodes import SchemaKind, SchemaNode


@dataclass(frozen=True)
class FieldEvent:
    """The field a visited node was reached through.

    Attributes:
        name: Property name in the parent object (array items keep the array's name)
        is_required: Whether the name is in the immediate parent's required set
        is_array: Whether the node was reached through an array items edge.
            Nested arrays collapse into this single flag.
        node: The visited node
    """

    name: str
    is_required: bool
    is_array: bool
    node: SchemaNode

    @property
    def enum_values(self) -> tuple[Any, ...]:
        return self.node.enum


class SchemaVisitor:
    """Callback table for visit_schema. Every callback defaults to a no-op."""

    def enter_root(self, node: SchemaNode) -> None:
        pass

    def leave_root(self, node: SchemaNode) -> None:
        pass

    def enter_object(self, event: FieldEvent) -> None:
        pass

    def leave_object(self, event: FieldEvent) -> None:
        pass

    def enter_array(self, event: FieldEvent) -> None:
        pass

    def leave_array(self, event: FieldEvent) -> None:
        pass

    def visit_string(self, event: FieldEvent) -> None:
        pass

    def visit_number(self, event: FieldEvent) -> None:
        pass

    def visit_boolean(self, event: FieldEvent) -> None:
        pass

    def visit_any(self, event: FieldEvent) -> None:
        pass

    def visit_custom_type(self, event: FieldEvent, type_name: str | None) -> None:
        """Called for references; type_name is None for anonymous inline composites."""


class _Traversal:
    def __init__(self, visitor: SchemaVisitor, definitions: Mapping[str, SchemaNode]):
        self.visitor = visitor
        self.definitions = definitions

    def lookup(self, node: SchemaNode) -> SchemaNode:
        if node.ref not in self.definitions:
            raise UnresolvedReference(node.ref or "", node.source_path)
        return self.definitions[node.ref]

    def root_body(self, schema: SchemaNode) -> SchemaNode:
        """Follow a chain of named references at the root to the node holding the fields."""
        seen: set[str] = set()
        body = schema
        while body.kind is SchemaKind.CUSTOM_TYPE and body.ref is not None and body.ref not in seen:
            seen.add(body.ref)
            body = self.lookup(body)
        return body

    def visit_properties(self, node: SchemaNode) -> None:
        for name, child in node.properties.items():
            self.visit(child, FieldEvent(name, name in node.required, False, child))

    def visit(self, node: SchemaNode, event: FieldEvent) -> None:
        visitor = self.visitor
        match node.kind:
            case SchemaKind.OBJECT:
                visitor.enter_object(event)
                self.visit_properties(node)
                visitor.leave_object(event)
            case SchemaKind.ARRAY:
                visitor.enter_array(event)
                items = node.items or SchemaNode(kind=SchemaKind.ANY, source_path=f"{node.source_path}/items")
                self.visit(items, FieldEvent(event.name, event.is_required, True, items))
                visitor.leave_array(event)
            case SchemaKind.STRING:
                visitor.visit_string(event)
            case SchemaKind.NUMBER:
                visitor.visit_number(event)
            case SchemaKind.BOOLEAN:
                visitor.visit_boolean(event)
            case SchemaKind.ANY:
                visitor.visit_any(event)
            case SchemaKind.CUSTOM_TYPE:
                if node.ref is None:
                    visitor.visit_custom_type(event, None)
                else:
                    self.lookup(node)
                    visitor.visit_custom_type(event, node.ref)
            case _:
                raise ValueError(f"Unsupported schema kind {node.kind!r} at {node.source_path}")


def visit_schema(
    schema: SchemaNode,
    visitor: SchemaVisitor,
    definitions: Mapping[str, SchemaNode] | None = None,
) -> None:
    """
    Walk a schema depth-first, reporting every node to the visitor.

    Args:
        schema: The root schema
        visitor: Receives the traversal events
        definitions: Named definitions visible in addition to the schema's own
            (the schema's own definitions take precedence)

    Raises:
        UnresolvedReference: If a named reference matches no visible definition
    """
    visible = dict(definitions or {})
    visible.update(schema.definitions)
    traversal = _Traversal(visitor, visible)

    visitor.enter_root(schema)
    body = traversal.root_body(schema)
    if body.kind is SchemaKind.OBJECT:
        traversal.visit_properties(body)
    visitor.leave_root(schema)
