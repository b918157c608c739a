"""
Go target: structs with encoding/json tags and a net/http client.
"""

from __future__ import annotations

from ..schema import FieldEvent, SchemaKind, SchemaNode
from ..utils import capitalize_first_char, sanitize_identifier
from .base import GENERATED_BY, ModelEmitter, TargetLanguage, TypeMapper

GO_MODELS_BASE = """type GraphQLError struct {
\tMessage string        `json:"message"`
\tPath    []interface{} `json:"path,omitempty"`
}"""


class GoTypeMapper(TypeMapper):
    LANGUAGE = "go"

    TYPE_MAP = {
        SchemaKind.STRING: "string",
        SchemaKind.NUMBER: "float64",
        SchemaKind.BOOLEAN: "bool",
        SchemaKind.ANY: "interface{}",
    }

    DYNAMIC_TYPE = "interface{}"

    def wrap(self, base: str, is_required: bool, is_array: bool) -> str:
        return f"{'[]' if is_array else ''}{'' if is_required else '*'}{base}"

    def identifier(self, field_name: str) -> str:
        name = sanitize_identifier(field_name)
        if name.startswith("_"):
            # Exported identifiers must start with an upper-case letter
            name = "X" + name
        return capitalize_first_char(name)

    def tag(self, field_name: str, is_required: bool) -> str:
        return f'`json:"{field_name},omitempty"`'

    def type_name(self, name: str) -> str:
        return self.identifier(name)


class GoStructEmitter(ModelEmitter):
    """Emits one struct; inline objects become anonymous nested structs."""

    def __init__(self, mapper: TypeMapper, name: str, with_errors: bool = False):
        super().__init__(mapper, name, with_errors)
        self._lines: list[str] = []
        self._depth = 0

    def _indent(self) -> str:
        return "\t" * self._depth

    def _field(self, event: FieldEvent, kind: SchemaKind, type_name: str | None = None) -> None:
        mapped = self.mapper.map_field(kind, event.name, event.is_required, event.is_array, type_name, event.node.integer)
        self._lines.append(f"{self._indent()}{mapped.identifier} {mapped.type_syntax} {mapped.tag}")

    def enter_root(self, node: SchemaNode) -> None:
        self._lines.append(f"type {self.name} struct {{")
        self._depth = 1

    def leave_root(self, node: SchemaNode) -> None:
        if self.with_errors:
            self._lines.append('\tErrors []GraphQLError `json:"errors,omitempty"`')
        self._lines.append("}")
        self._depth = 0

    def enter_object(self, event: FieldEvent) -> None:
        struct = self.mapper.wrap("struct {", event.is_required, event.is_array)
        self._lines.append(f"{self._indent()}{self.mapper.identifier(event.name)} {struct}")
        self._depth += 1

    def leave_object(self, event: FieldEvent) -> None:
        self._depth -= 1
        self._lines.append(f"{self._indent()}}} {self.mapper.tag(event.name, event.is_required)}")

    def visit_string(self, event: FieldEvent) -> None:
        self._field(event, SchemaKind.STRING)

    def visit_number(self, event: FieldEvent) -> None:
        self._field(event, SchemaKind.NUMBER)

    def visit_boolean(self, event: FieldEvent) -> None:
        self._field(event, SchemaKind.BOOLEAN)

    def visit_any(self, event: FieldEvent) -> None:
        self._field(event, SchemaKind.ANY)

    def visit_custom_type(self, event: FieldEvent, type_name: str | None) -> None:
        self._field(event, SchemaKind.CUSTOM_TYPE, type_name)

    def code(self) -> str:
        return "\n".join(self._lines)


class GoLanguage(TargetLanguage):
    NAME = "go"
    MODELS_PATH = "models.go"
    CLIENT_PATH = "client.go"
    FILE_EXTENSION = "go"

    def __init__(self):
        super().__init__(GoTypeMapper())

    def models_header(self, package_name: str) -> str:
        return f"// {GENERATED_BY}\npackage {package_name}\n\n"

    def method_name(self, operation_type_name: str) -> str:
        return self.mapper.type_name(operation_type_name)

    def models_base(self) -> str:
        return GO_MODELS_BASE

    def model_emitter(self, name: str, with_errors: bool) -> ModelEmitter:
        return GoStructEmitter(self.mapper, name, with_errors)
