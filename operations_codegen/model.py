"""
Generator input and output types.

GenerationConfig is the read-only description of an application's
operations handed to every template; OutputFile is what templates produce.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import UnhandledExecutionEngine
from .schema import SchemaKind, SchemaNode, parse_schema


class OperationKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


class ExecutionEngine(str, Enum):
    NODEJS = "nodejs"
    GRAPHQL = "graphql"


@dataclass(frozen=True)
class Operation:
    """A named query, mutation or subscription with typed input and output."""

    name: str
    kind: OperationKind
    # Unknown engines are kept as plain strings so generation can report them
    execution_engine: ExecutionEngine | str = ExecutionEngine.GRAPHQL
    variables_schema: SchemaNode = field(default_factory=SchemaNode.empty_object)
    response_schema: SchemaNode | None = None
    requires_authentication: bool = False
    is_live_query: bool = False

    @property
    def has_input(self) -> bool:
        """Whether the operation declares any input variable."""
        return bool(self.variables_schema.properties)

    @property
    def type_name(self) -> str:
        """Stem of the generated type names ("users/update" -> "users_update")."""
        return self.name.replace("/", "_")

    @staticmethod
    def from_dict(d: dict[str, Any]) -> Operation:
        """Create an operation from its JSON representation."""
        engine = d.get("executionEngine", ExecutionEngine.GRAPHQL.value)
        try:
            engine = ExecutionEngine(engine)
        except ValueError:
            pass
        response_schema = d.get("responseSchema")
        return Operation(
            name=d["name"],
            kind=OperationKind(d.get("kind", OperationKind.QUERY.value)),
            execution_engine=engine,
            variables_schema=parse_schema(d.get("variablesSchema") or {"type": "object", "properties": {}}),
            response_schema=parse_schema(response_schema) if response_schema is not None else None,
            requires_authentication=d.get("requiresAuthentication", False),
            is_live_query=d.get("isLiveQuery", False),
        )


@dataclass(frozen=True)
class GenerationConfig:
    """Everything a generation run reads. Never mutated by templates."""

    operations: tuple[Operation, ...] = ()
    definitions: dict[str, SchemaNode] = field(default_factory=dict)
    deployment_base_url: str = "http://localhost:9991"

    def __post_init__(self):
        object.__setattr__(self, "operations", tuple(self.operations))
        seen: set[str] = set()
        for op in self.operations:
            if op.name in seen:
                raise ValueError(f"Duplicate operation name: {op.name}")
            seen.add(op.name)

    def operations_of_kind(self, kind: OperationKind) -> list[Operation]:
        return [op for op in self.operations if op.kind is kind]

    @property
    def queries(self) -> list[Operation]:
        return self.operations_of_kind(OperationKind.QUERY)

    @property
    def mutations(self) -> list[Operation]:
        return self.operations_of_kind(OperationKind.MUTATION)

    @property
    def subscriptions(self) -> list[Operation]:
        return self.operations_of_kind(OperationKind.SUBSCRIPTION)

    @property
    def live_queries(self) -> list[Operation]:
        return [op for op in self.queries if op.is_live_query]

    def all_definitions(self) -> dict[str, SchemaNode]:
        """Config-level definitions followed by those declared inside operation schemas.

        The first definition registered under a name wins.
        """
        definitions = dict(self.definitions)
        for op in self.operations:
            for schema in (op.variables_schema, op.response_schema):
                if schema is None:
                    continue
                for name, definition in schema.definitions.items():
                    definitions.setdefault(name, definition)
        return definitions

    @staticmethod
    def from_dict(d: dict[str, Any]) -> GenerationConfig:
        """Create a config from its JSON representation."""
        return GenerationConfig(
            operations=tuple(Operation.from_dict(op) for op in d.get("operations", [])),
            definitions={name: parse_schema(schema, f"#/definitions/{name}") for name, schema in d.get("definitions", {}).items()},
            deployment_base_url=d.get("deploymentBaseURL", "http://localhost:9991"),
        )


@dataclass(frozen=True)
class OutputFile:
    """A generated file. Several templates may contribute to the same path."""

    path: str
    content: str
    header: str | None = None

    def render(self) -> str:
        """The full file text: header followed by content."""
        return (self.header or "") + self.content


def response_data_schema(op: Operation) -> SchemaNode | None:
    """Extract the schema of an operation's response data.

    Node.js operations return their data directly; GraphQL operations wrap it
    in a "data" property, which may be absent.

    Raises:
        UnhandledExecutionEngine: If the engine has no extraction rule
    """
    match op.execution_engine:
        case ExecutionEngine.NODEJS:
            return op.response_schema
        case ExecutionEngine.GRAPHQL:
            if op.response_schema is None or op.response_schema.kind is not SchemaKind.OBJECT:
                return None
            return op.response_schema.properties.get("data")
    raise UnhandledExecutionEngine(op.name, op.execution_engine)
