"""
Base classes for target languages.

A target language bundles a TypeMapper (schema kind + field modifiers ->
type syntax and serialization tag), a model emitter driven by the schema
visitor, and the jinja2 templates used for the generated client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2

from .. import __version__
from ..schema import FieldEvent, SchemaKind, SchemaNode, SchemaVisitor, visit_schema
from ..utils import snake_case, snake_to_pascal_case

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent.resolve() / "templates"

GENERATED_BY = f"Code generated by operations_codegen v{__version__}. DO NOT EDIT."


@dataclass(frozen=True)
class MappedField:
    """A field as it appears in the target language.

    Attributes:
        identifier: The field name after casing and escaping
        type_syntax: The field type, including sequence and nullable wrappers
        tag: The serialization annotation carrying json_name
        json_name: The original schema field name, verbatim
    """

    identifier: str
    type_syntax: str
    tag: str
    json_name: str


class TypeMapper(ABC):
    """Maps visited schema fields to target language types."""

    # Target language name
    LANGUAGE: str = ""

    # Types for leaf kinds
    TYPE_MAP: dict[SchemaKind, str] = {}

    # Type used when a field cannot be typed statically
    DYNAMIC_TYPE: str = ""

    def map_field(
        self,
        kind: SchemaKind,
        field_name: str,
        is_required: bool,
        is_array: bool,
        type_name: str | None = None,
        integer: bool = False,
    ) -> MappedField:
        """
        Map a field to its target representation.

        Args:
            kind: Kind of the field's schema node
            field_name: The original schema field name
            is_required: Whether the parent object requires the field
            is_array: Whether the field is a sequence of the kind
            type_name: Name of the referenced or generated type, for custom types and objects
            integer: Whether a number is an integer

        Returns:
            The mapped field
        """
        base = self.base_type(kind, field_name, type_name, integer)
        return MappedField(
            identifier=self.identifier(field_name),
            type_syntax=self.wrap(base, is_required, is_array),
            tag=self.tag(field_name, is_required),
            json_name=field_name,
        )

    def base_type(self, kind: SchemaKind, field_name: str, type_name: str | None, integer: bool) -> str:
        """The type of a single, required value of the given kind."""
        match kind:
            case SchemaKind.CUSTOM_TYPE | SchemaKind.OBJECT:
                if type_name is None:
                    logger.warning(
                        "Field '%s' has an anonymous type that %s cannot name, using %s",
                        field_name,
                        self.LANGUAGE,
                        self.DYNAMIC_TYPE,
                    )
                    return self.DYNAMIC_TYPE
                return self.type_name(type_name)
            case SchemaKind.NUMBER if integer:
                return self.integer_type()
            case SchemaKind.ARRAY:
                raise ValueError(f"Array field '{field_name}' must be mapped through its items")
            case _:
                return self.TYPE_MAP[kind]

    def integer_type(self) -> str:
        return self.TYPE_MAP[SchemaKind.NUMBER]

    @abstractmethod
    def wrap(self, base: str, is_required: bool, is_array: bool) -> str:
        """Wrap a type in the sequence and nullable forms its modifiers require."""

    @abstractmethod
    def identifier(self, field_name: str) -> str:
        """Case and escape a schema field name into a field identifier."""

    @abstractmethod
    def tag(self, field_name: str, is_required: bool) -> str:
        """Serialization annotation preserving the original field name."""

    @abstractmethod
    def type_name(self, name: str) -> str:
        """Case and escape a definition or generated type name."""


class TargetLanguage(ABC):
    """A language the generator can emit models and a client for."""

    NAME: str = ""

    # Output file names
    MODELS_PATH: str = ""
    CLIENT_PATH: str | None = None

    # File extension of the jinja2 templates
    FILE_EXTENSION: str = ""

    def __init__(self, mapper: TypeMapper):
        self.mapper = mapper
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR / self.NAME)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["snake_to_pascal"] = snake_to_pascal_case
        self.jinja_env.filters["snake_case"] = snake_case
        self.jinja_env.filters["type_name"] = mapper.type_name

    @abstractmethod
    def models_header(self, package_name: str) -> str:
        """Header of the models file."""

    @abstractmethod
    def models_base(self) -> str:
        """Types every models file needs (the GraphQL error type)."""

    @abstractmethod
    def model_emitter(self, name: str, with_errors: bool) -> ModelEmitter:
        """Create an emitter for one top-level type."""

    def method_name(self, operation_type_name: str) -> str:
        """Name of the client method calling an operation."""
        return snake_case(operation_type_name)

    def client_header(self, package_name: str) -> str:
        return self.models_header(package_name)

    def render_model(
        self,
        schema: SchemaNode,
        name: str,
        definitions: Mapping[str, SchemaNode] | None = None,
        with_errors: bool = False,
    ) -> str:
        """
        Render the type declaration(s) for a schema.

        Args:
            schema: The schema to render
            name: Name of the top-level type (before language casing)
            definitions: Definitions that references may point to
            with_errors: Whether to add a list of GraphQL errors to the top-level type

        Returns:
            Source code of the declarations
        """
        emitter = self.model_emitter(self.mapper.type_name(name), with_errors)
        emitter.reserved_names = {self.mapper.type_name(n) for n in definitions or {}}
        visit_schema(schema, emitter, definitions)
        return emitter.code()

    def render_client(self, context: dict[str, Any]) -> str:
        """Render the client template with the given context."""
        template = self.jinja_env.get_template(f"client.{self.FILE_EXTENSION}.jinja2")
        return template.render(context)


class ModelEmitter(SchemaVisitor, ABC):
    """A schema visitor that accumulates source code."""

    def __init__(self, mapper: TypeMapper, name: str, with_errors: bool = False):
        self.mapper = mapper
        self.name = name
        self.with_errors = with_errors
        # Type names declared elsewhere in the models file
        self.reserved_names: set[str] = set()

    @abstractmethod
    def code(self) -> str:
        """The emitted source code."""


@dataclass
class ClassBuilder:
    """Fields collected for one class while walking a schema."""

    name: str
    fields: list[MappedField] = field(default_factory=list)
    comments: dict[str, str] = field(default_factory=dict)


class HoistingEmitter(ModelEmitter):
    """Emitter for languages without anonymous nested types.

    Inline objects become separate classes named after their parent and
    field ("UserInput" + "address" -> "UserInputAddress"), emitted before
    the class that uses them.
    """

    def __init__(self, mapper: TypeMapper, name: str, with_errors: bool = False):
        super().__init__(mapper, name, with_errors)
        self._stack: list[ClassBuilder] = []
        self._finished: list[tuple[ClassBuilder, bool]] = []

    @abstractmethod
    def render_class(self, builder: ClassBuilder, is_root: bool) -> str:
        """Render one finished class."""

    def enum_comment(self, values: tuple[Any, ...]) -> str:
        return ""

    def add_field(self, event: FieldEvent, kind: SchemaKind, type_name: str | None = None) -> None:
        mapped = self.mapper.map_field(kind, event.name, event.is_required, event.is_array, type_name, event.node.integer)
        builder = self._stack[-1]
        builder.fields.append(mapped)
        if event.enum_values:
            builder.comments[mapped.identifier] = self.enum_comment(event.enum_values)

    def enter_root(self, node: SchemaNode) -> None:
        self._stack.append(ClassBuilder(self.name))

    def leave_root(self, node: SchemaNode) -> None:
        self._finished.append((self._stack.pop(), True))

    def enter_object(self, event: FieldEvent) -> None:
        parent = self._stack[-1]
        self._stack.append(ClassBuilder(self._hoisted_name(parent.name + self.mapper.type_name(event.name))))

    def _hoisted_name(self, name: str) -> str:
        taken = self.reserved_names | {self.name} | {b.name for b in self._stack} | {b.name for b, _ in self._finished}
        if name not in taken:
            return name
        suffix = 2
        while f"{name}{suffix}" in taken:
            suffix += 1
        logger.warning("Inline object type %s clashes with another type, naming it %s%d", name, name, suffix)
        return f"{name}{suffix}"

    def leave_object(self, event: FieldEvent) -> None:
        builder = self._stack.pop()
        self._finished.append((builder, False))
        self.add_field(event, SchemaKind.OBJECT, builder.name)

    def visit_string(self, event: FieldEvent) -> None:
        self.add_field(event, SchemaKind.STRING)

    def visit_number(self, event: FieldEvent) -> None:
        self.add_field(event, SchemaKind.NUMBER)

    def visit_boolean(self, event: FieldEvent) -> None:
        self.add_field(event, SchemaKind.BOOLEAN)

    def visit_any(self, event: FieldEvent) -> None:
        self.add_field(event, SchemaKind.ANY)

    def visit_custom_type(self, event: FieldEvent, type_name: str | None) -> None:
        self.add_field(event, SchemaKind.CUSTOM_TYPE, type_name)

    def code(self) -> str:
        return "\n\n".join(self.render_class(builder, is_root) for builder, is_root in self._finished)
