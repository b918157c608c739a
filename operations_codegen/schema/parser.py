"""
JSON Schema parser.

Turns a raw JSON Schema dictionary into a SchemaNode tree without resolving
references or doing any language-specific processing.
"""

from __future__ import annotations

from typing import Any

from .nodes import SchemaKind, SchemaNode


class SchemaParser:
    """Parses JSON Schema into SchemaNode trees."""

    PRIMITIVE_KINDS = {
        "string": SchemaKind.STRING,
        "number": SchemaKind.NUMBER,
        "integer": SchemaKind.NUMBER,
        "boolean": SchemaKind.BOOLEAN,
        "null": SchemaKind.ANY,
    }

    def parse(self, schema: dict[str, Any] | bool | None, path: str = "#") -> SchemaNode:
        """
        Parse a JSON Schema into a SchemaNode.

        Args:
            schema: The JSON Schema dictionary (booleans and None mean "anything")
            path: Location of the schema, used for error messages

        Returns:
            The parsed node, with its definitions parsed as well
        """
        if not isinstance(schema, dict):
            return SchemaNode(kind=SchemaKind.ANY, source_path=path)

        node = self._parse_schema_node(schema, path)
        definitions = schema.get("definitions") or schema.get("$defs") or {}
        for name, def_schema in definitions.items():
            # Skip comment fields
            if not isinstance(def_schema, dict):
                continue
            node.definitions[name] = self.parse(def_schema, f"{path}/definitions/{name}")
        return node

    @staticmethod
    def ref_name(ref_path: str) -> str:
        """Extract the definition name from a $ref path.

        "#/definitions/User" and "#/$defs/User" both give "User"; any other
        reference uses its last path segment.
        """
        parts = ref_path.split("/")
        if len(parts) >= 3 and parts[0] == "#" and parts[1] in ("definitions", "$defs"):
            return parts[2]
        return parts[-1]

    def _parse_schema_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        if "$ref" in schema:
            return SchemaNode(kind=SchemaKind.CUSTOM_TYPE, ref=self.ref_name(schema["$ref"]), source_path=path)

        if "oneOf" in schema or "anyOf" in schema:
            return self._parse_union_node(schema, path)

        if "allOf" in schema:
            # Inheritance cannot be expressed as a single named type
            return self._anonymous(path)

        if "type" in schema:
            return self._parse_type_node(schema, path)

        if "enum" in schema:
            values = tuple(schema["enum"])
            if values and all(isinstance(v, str) for v in values):
                return SchemaNode(kind=SchemaKind.STRING, enum=values, source_path=path)

        if "properties" in schema:
            return self._parse_object_node(schema, path)

        return SchemaNode(kind=SchemaKind.ANY, source_path=path)

    def _parse_union_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        union_key = "oneOf" if "oneOf" in schema else "anyOf"
        variants = [v for v in schema[union_key] if not (isinstance(v, dict) and v.get("type") == "null")]
        if len(variants) == 1 and isinstance(variants[0], dict):
            # T | null is just an optional T
            return self._parse_schema_node(variants[0], f"{path}/{union_key}/0")
        return self._anonymous(path)

    def _parse_type_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        type_name = schema["type"]
        if isinstance(type_name, list):
            non_null = [t for t in type_name if t != "null"]
            if len(non_null) != 1:
                return self._anonymous(path) if non_null else SchemaNode(kind=SchemaKind.ANY, source_path=path)
            type_name = non_null[0]

        match type_name:
            case "object":
                if "properties" in schema:
                    return self._parse_object_node(schema, path)
                return SchemaNode(kind=SchemaKind.ANY, source_path=path)
            case "array":
                return self._parse_array_node(schema, path)
            case _ if type_name in self.PRIMITIVE_KINDS:
                return SchemaNode(
                    kind=self.PRIMITIVE_KINDS[type_name],
                    enum=tuple(schema.get("enum", ())),
                    integer=type_name == "integer",
                    source_path=path,
                )
            case _:
                return SchemaNode(kind=SchemaKind.ANY, source_path=path)

    def _parse_object_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        properties = {
            name: self._parse_property(prop_schema, f"{path}/properties/{name}")
            for name, prop_schema in schema.get("properties", {}).items()
        }
        return SchemaNode(
            kind=SchemaKind.OBJECT,
            properties=properties,
            required=frozenset(schema.get("required", ())),
            source_path=path,
        )

    def _parse_property(self, schema: Any, path: str) -> SchemaNode:
        if not isinstance(schema, dict):
            return SchemaNode(kind=SchemaKind.ANY, source_path=path)
        return self._parse_schema_node(schema, path)

    def _parse_array_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        items = schema.get("items")
        if isinstance(items, dict):
            item_node = self._parse_schema_node(items, f"{path}/items")
        elif isinstance(items, list):
            # Tuples have no single item type
            item_node = self._anonymous(f"{path}/items")
        else:
            item_node = SchemaNode(kind=SchemaKind.ANY, source_path=f"{path}/items")
        return SchemaNode(kind=SchemaKind.ARRAY, items=item_node, source_path=path)

    @staticmethod
    def _anonymous(path: str) -> SchemaNode:
        return SchemaNode(kind=SchemaKind.CUSTOM_TYPE, source_path=path)


def parse_schema(schema: dict[str, Any] | bool | None, path: str = "#") -> SchemaNode:
    """Convenience function to parse a JSON Schema dictionary."""
    return SchemaParser().parse(schema, path)
