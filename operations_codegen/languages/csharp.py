"""
C# target: Newtonsoft.Json model classes.
"""

from __future__ import annotations

from typing import Any

from ..schema import SchemaKind
from ..utils import snake_to_pascal_case
from .base import GENERATED_BY, ClassBuilder, HoistingEmitter, ModelEmitter, TargetLanguage, TypeMapper

# C# reserved keywords that need escaping
CS_RESERVED_KEYWORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
    "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else", "enum",
    "event", "explicit", "extern", "false", "finally", "fixed", "float", "for", "foreach", "goto",
    "if", "implicit", "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params", "private", "protected", "public",
    "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof", "stackalloc", "static", "string",
    "struct", "switch", "this", "throw", "true", "try", "typeof", "uint", "ulong", "unchecked",
    "unsafe", "ushort", "using", "virtual", "void", "volatile", "while",
}  # fmt: skip

CS_MODELS_BASE = """public class GraphQLError
{
    [JsonProperty("message")]
    public string Message { get; set; }

    [JsonProperty("path")]
    public List<object>? Path { get; set; }
}"""


class CSharpTypeMapper(TypeMapper):
    LANGUAGE = "cs"

    TYPE_MAP = {
        SchemaKind.STRING: "string",
        SchemaKind.NUMBER: "double",
        SchemaKind.BOOLEAN: "bool",
        SchemaKind.ANY: "object",
    }

    DYNAMIC_TYPE = "object"

    def integer_type(self) -> str:
        return "long"

    def wrap(self, base: str, is_required: bool, is_array: bool) -> str:
        t = f"List<{base}>" if is_array else base
        return t if is_required else f"{t}?"

    def identifier(self, field_name: str) -> str:
        name = snake_to_pascal_case(field_name) or "Value"
        if name[0].isdigit():
            name = "_" + name
        if name in CS_RESERVED_KEYWORDS:
            return f"@{name}"
        return name

    def tag(self, field_name: str, is_required: bool) -> str:
        json_name = field_name.replace("\\", "\\\\").replace('"', '\\"')
        return f'[JsonProperty("{json_name}")]'

    def type_name(self, name: str) -> str:
        return self.identifier(name)


class CSharpModelEmitter(HoistingEmitter):
    def enum_comment(self, values: tuple[Any, ...]) -> str:
        values_str = ", ".join(f'"{v}"' for v in values)
        return f" // Allowed values: {values_str}"

    def render_class(self, builder: ClassBuilder, is_root: bool) -> str:
        members = []
        for f in builder.fields:
            # A member cannot share the name of its enclosing type
            identifier = f.identifier + "_" if f.identifier == builder.name else f.identifier
            comment = builder.comments.get(f.identifier, "")
            members.append(f"    {f.tag}\n    public {f.type_syntax} {identifier} {{ get; set; }}{comment}")
        if is_root and self.with_errors:
            members.append('    [JsonProperty("errors")]\n    public List<GraphQLError>? Errors { get; set; }')
        body = "\n\n".join(members)
        return f"public class {builder.name}\n{{\n{body}\n}}" if body else f"public class {builder.name}\n{{\n}}"


class CSharpLanguage(TargetLanguage):
    NAME = "cs"
    MODELS_PATH = "Models.cs"
    FILE_EXTENSION = "cs"

    def __init__(self):
        super().__init__(CSharpTypeMapper())

    def models_header(self, package_name: str) -> str:
        namespace = ".".join(snake_to_pascal_case(part) for part in package_name.split("."))
        return (
            f"// {GENERATED_BY}\n"
            "#nullable enable\n"
            "using System.Collections.Generic;\n"
            "using Newtonsoft.Json;\n\n"
            f"namespace {namespace};\n\n"
        )

    def models_base(self) -> str:
        return CS_MODELS_BASE

    def model_emitter(self, name: str, with_errors: bool) -> ModelEmitter:
        return CSharpModelEmitter(self.mapper, name, with_errors)
