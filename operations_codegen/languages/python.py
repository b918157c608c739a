"""
Python target: dataclasses-json models and an asyncio client.
"""

from __future__ import annotations

import keyword
from typing import Any

from ..schema import SchemaKind
from ..utils import sanitize_identifier, snake_to_pascal_case
from .base import GENERATED_BY, ClassBuilder, HoistingEmitter, ModelEmitter, TargetLanguage, TypeMapper

PYTHON_MODELS_IMPORTS = """from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import config, dataclass_json
"""

PYTHON_MODELS_BASE = '''@dataclass_json
@dataclass(kw_only=True)
class GraphQLError:
    message: str = field(metadata=config(field_name="message"))
    path: list[Any] | None = field(default=None, metadata=config(field_name="path"))'''


# Names used in class bodies and annotations of the models module; fields must not shadow them
PYTHON_RESERVED_NAMES = {
    "Any", "GraphQLError", "annotations", "bool", "config", "dataclass", "dataclass_json", "field", "float", "int",
    "list", "str",
}  # fmt: skip


class PythonTypeMapper(TypeMapper):
    LANGUAGE = "python"

    TYPE_MAP = {
        SchemaKind.STRING: "str",
        SchemaKind.NUMBER: "float",
        SchemaKind.BOOLEAN: "bool",
        SchemaKind.ANY: "Any",
    }

    DYNAMIC_TYPE = "Any"

    def integer_type(self) -> str:
        return "int"

    def wrap(self, base: str, is_required: bool, is_array: bool) -> str:
        t = f"list[{base}]" if is_array else base
        return t if is_required else f"{t} | None"

    def identifier(self, field_name: str) -> str:
        name = sanitize_identifier(field_name)
        if keyword.iskeyword(name) or name in PYTHON_RESERVED_NAMES:
            name += "_"
        return name

    def tag(self, field_name: str, is_required: bool) -> str:
        json_name = field_name.replace("\\", "\\\\").replace('"', '\\"')
        if is_required:
            return f'field(metadata=config(field_name="{json_name}"))'
        return f'field(default=None, metadata=config(field_name="{json_name}"))'

    def type_name(self, name: str) -> str:
        return snake_to_pascal_case(name) or "Model"


class PythonModelEmitter(HoistingEmitter):
    """Emits dataclasses; fields are keyword-only so optional ones may precede required ones."""

    def enum_comment(self, values: tuple[Any, ...]) -> str:
        values_str = ", ".join(f'"{v}"' for v in values)
        return f"  # Allowed values: {values_str}"

    def render_class(self, builder: ClassBuilder, is_root: bool) -> str:
        lines = ["@dataclass_json", "@dataclass(kw_only=True)", f"class {builder.name}:"]
        for f in builder.fields:
            lines.append(f"    {f.identifier}: {f.type_syntax} = {f.tag}{builder.comments.get(f.identifier, '')}")
        if is_root and self.with_errors:
            lines.append('    errors: list[GraphQLError] | None = field(default=None, metadata=config(field_name="errors"))')
        if len(lines) == 3:
            lines.append("    pass")
        return "\n".join(lines)


class PythonLanguage(TargetLanguage):
    NAME = "python"
    MODELS_PATH = "models.py"
    CLIENT_PATH = "client.py"
    FILE_EXTENSION = "py"

    def __init__(self):
        super().__init__(PythonTypeMapper())

    def models_header(self, package_name: str) -> str:
        return f"# {GENERATED_BY}\n{PYTHON_MODELS_IMPORTS}\n\n"

    def client_header(self, package_name: str) -> str:
        return f"# {GENERATED_BY}\n"

    def models_base(self) -> str:
        return PYTHON_MODELS_BASE

    def model_emitter(self, name: str, with_errors: bool) -> ModelEmitter:
        return PythonModelEmitter(self.mapper, name, with_errors)
