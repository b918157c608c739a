import pytest

from operations_codegen.schema import SchemaKind, SchemaParser, parse_schema


class TestSchemaParser:
    """Test parsing raw JSON Schema into SchemaNode trees"""

    def test_object_properties_and_required(self):
        node = parse_schema(
            {
                "type": "object",
                "properties": {"id": {"type": "string"}, "bio": {"type": "string"}},
                "required": ["id"],
            }
        )
        assert node.kind is SchemaKind.OBJECT
        assert list(node.properties) == ["id", "bio"]
        assert node.required == frozenset({"id"})
        assert node.properties["bio"].source_path == "#/properties/bio"

    def test_property_order_is_preserved(self):
        names = ["zeta", "alpha", "mid"]
        node = parse_schema({"type": "object", "properties": {n: {"type": "string"} for n in names}})
        assert list(node.properties) == names

    @pytest.mark.parametrize(
        "type_name,kind",
        [
            ("string", SchemaKind.STRING),
            ("number", SchemaKind.NUMBER),
            ("integer", SchemaKind.NUMBER),
            ("boolean", SchemaKind.BOOLEAN),
            ("null", SchemaKind.ANY),
            ("unknown", SchemaKind.ANY),
        ],
    )
    def test_primitive_kinds(self, type_name, kind):
        assert parse_schema({"type": type_name}).kind is kind

    def test_integer_flag(self):
        assert parse_schema({"type": "integer"}).integer
        assert not parse_schema({"type": "number"}).integer

    def test_nullable_type_list(self):
        node = parse_schema({"type": ["string", "null"]})
        assert node.kind is SchemaKind.STRING

    def test_multi_type_list_is_anonymous(self):
        node = parse_schema({"type": ["string", "number"]})
        assert node.kind is SchemaKind.CUSTOM_TYPE
        assert node.is_anonymous

    def test_ref(self):
        node = parse_schema({"$ref": "#/definitions/User"})
        assert node.kind is SchemaKind.CUSTOM_TYPE
        assert node.ref == "User"

    @pytest.mark.parametrize(
        "ref,name",
        [("#/definitions/User", "User"), ("#/$defs/User", "User"), ("other.json#/Thing", "Thing")],
    )
    def test_ref_name(self, ref, name):
        assert SchemaParser.ref_name(ref) == name

    def test_optional_union_unwraps(self):
        node = parse_schema({"anyOf": [{"$ref": "#/definitions/User"}, {"type": "null"}]})
        assert node.ref == "User"

    def test_union_is_anonymous(self):
        node = parse_schema({"oneOf": [{"type": "string"}, {"type": "number"}]})
        assert node.is_anonymous

    def test_all_of_is_anonymous(self):
        assert parse_schema({"allOf": [{"$ref": "#/definitions/A"}]}).is_anonymous

    def test_object_without_properties_is_any(self):
        assert parse_schema({"type": "object"}).kind is SchemaKind.ANY

    def test_array_items(self):
        node = parse_schema({"type": "array", "items": {"type": "string"}})
        assert node.kind is SchemaKind.ARRAY
        assert node.items.kind is SchemaKind.STRING

    def test_array_without_items(self):
        assert parse_schema({"type": "array"}).items.kind is SchemaKind.ANY

    def test_tuple_items_are_anonymous(self):
        node = parse_schema({"type": "array", "items": [{"type": "string"}, {"type": "number"}]})
        assert node.items.is_anonymous

    def test_string_enum(self):
        node = parse_schema({"type": "string", "enum": ["a", "b"]})
        assert node.enum == ("a", "b")

    def test_untyped_string_enum(self):
        node = parse_schema({"enum": ["red", "green"]})
        assert node.kind is SchemaKind.STRING
        assert node.enum == ("red", "green")

    def test_definitions(self):
        node = parse_schema(
            {
                "type": "object",
                "properties": {"user": {"$ref": "#/definitions/User"}},
                "definitions": {
                    "User": {"type": "object", "properties": {"id": {"type": "string"}}},
                    "$comment": "ignored",
                },
                "$defs": {},
            }
        )
        assert list(node.definitions) == ["User"]
        assert node.definitions["User"].source_path == "#/definitions/User"

    @pytest.mark.parametrize("schema", [None, True, False])
    def test_non_dict_schema_is_any(self, schema):
        assert parse_schema(schema).kind is SchemaKind.ANY
