"""
Model and client templates.

Every template targets one language and contributes to that language's
models or client file:

    ModelsBase          => models (GraphQL error type)
    InputModels         => ModelsBase ===> models (<op>Input types)
    ResponseDataModels  => models (<op>ResponseData types)
    BaseDataModels      => models (shared definitions)
    ResponseModels      => ModelsBase + ResponseDataModels + BaseDataModels ===> models (<op>Response types)
    ClientTemplate      => client
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import TemplateConfig
from ..languages import TargetLanguage, get_language
from ..model import GenerationConfig, Operation, OutputFile, response_data_schema
from ..schema import SchemaKind, SchemaNode
from .template import Template


@dataclass(frozen=True)
class TargetTemplate(Template):
    """A template emitting code for one target language."""

    target: str
    config: TemplateConfig = field(default_factory=TemplateConfig)

    @property
    def language(self) -> TargetLanguage:
        return get_language(self.target)

    @property
    def name(self) -> str:
        return f"{type(self).__name__}({self.target})"

    def models_file(self, content: str, with_header: bool = True) -> OutputFile:
        header = self.language.models_header(self.config.package_name) if with_header else None
        return OutputFile(path=self.language.MODELS_PATH, content=content, header=header)


def _join(parts: list[str]) -> str:
    return "\n\n".join(part for part in parts if part)


@dataclass(frozen=True)
class ModelsBase(TargetTemplate):
    """Types every models file relies on."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        return [self.models_file(self.language.models_base(), with_header=False)]


@dataclass(frozen=True)
class InputModels(TargetTemplate):
    """One <op>Input type per operation that takes input."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        definitions = config.all_definitions()
        content = _join(
            [
                self.language.render_model(op.variables_schema, op.type_name + "Input", definitions)
                for op in config.operations
                if op.has_input
            ]
        )
        return [self.models_file(content)]

    def dependencies(self) -> list[Template]:
        return [ModelsBase(self.target, self.config)]


@dataclass(frozen=True)
class ResponseDataModels(TargetTemplate):
    """One <op>ResponseData type per operation with a response data schema."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        definitions = config.all_definitions()
        parts = []
        for op in config.operations:
            schema = response_data_schema(op)
            if schema is not None:
                parts.append(self.language.render_model(schema, op.type_name + "ResponseData", definitions))
        return [self.models_file(_join(parts))]


@dataclass(frozen=True)
class BaseDataModels(TargetTemplate):
    """One type per shared definition."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        definitions = config.all_definitions()
        content = _join([self.language.render_model(definition, name, definitions) for name, definition in definitions.items()])
        return [self.models_file(content)]


@dataclass(frozen=True)
class ResponseModels(TargetTemplate):
    """One <op>Response type per operation: its data plus the GraphQL errors."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        definitions = config.all_definitions()
        parts = []
        for op in config.operations:
            data_name = op.type_name + "ResponseData"
            if response_data_schema(op) is not None:
                data = SchemaNode(kind=SchemaKind.CUSTOM_TYPE, ref=data_name)
                visible = {**definitions, data_name: SchemaNode.empty_object()}
            else:
                data = SchemaNode(kind=SchemaKind.ANY)
                visible = definitions
            schema = SchemaNode(kind=SchemaKind.OBJECT, properties={"data": data})
            parts.append(self.language.render_model(schema, op.type_name + "Response", visible, with_errors=True))
        return [self.models_file(_join(parts))]

    def dependencies(self) -> list[Template]:
        return [
            ModelsBase(self.target, self.config),
            ResponseDataModels(self.target, self.config),
            BaseDataModels(self.target, self.config),
        ]


@dataclass(frozen=True)
class ClientTemplate(TargetTemplate):
    """The typed client, rendered from the target's jinja2 client template."""

    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        language = self.language
        if language.CLIENT_PATH is None:
            raise ValueError(f"No client template for language {self.target}")
        context = self.context(config)
        return [
            OutputFile(
                path=language.CLIENT_PATH,
                content=language.render_client(context),
                header=language.client_header(self.config.package_name),
            )
        ]

    def context(self, config: GenerationConfig) -> dict[str, Any]:
        """The jinja2 context of the client template."""
        operations = [self._operation_context(op) for op in config.operations]
        by_kind = {kind: [o for o in operations if o["kind"] == kind] for kind in ("query", "mutation", "subscription")}
        model_imports = sorted({t for o in operations for t in (o["input_type"], o["data_type"]) if t})
        return {
            "package_name": self.config.package_name,
            "base_url": config.deployment_base_url,
            "operations": operations,
            "queries": by_kind["query"],
            "mutations": by_kind["mutation"],
            "subscriptions": by_kind["subscription"],
            "live_queries": [o for o in by_kind["query"] if o["live_query"]],
            "model_imports": model_imports,
        }

    def _operation_context(self, op: Operation) -> dict[str, Any]:
        mapper = self.language.mapper
        has_data = response_data_schema(op) is not None
        return {
            "name": op.name,
            "kind": op.kind.value,
            "method_name": self.language.method_name(op.type_name),
            "has_input": op.has_input,
            "input_type": mapper.type_name(op.type_name + "Input") if op.has_input else None,
            "data_type": mapper.type_name(op.type_name + "ResponseData") if has_data else None,
            "response_type": mapper.type_name(op.type_name + "Response"),
            "live_query": op.is_live_query,
            "requires_authentication": op.requires_authentication,
        }


def client_templates(target: str, config: TemplateConfig | None = None) -> list[Template]:
    """The root templates generating a target's models and client."""
    config = config or TemplateConfig()
    roots: list[Template] = [InputModels(target, config), ResponseModels(target, config)]
    if get_language(target).CLIENT_PATH is not None:
        roots.append(ClientTemplate(target, config))
    return roots


def model_templates(target: str, config: TemplateConfig | None = None) -> list[Template]:
    """The root templates generating a target's models only."""
    config = config or TemplateConfig()
    return [InputModels(target, config), ResponseModels(target, config)]
