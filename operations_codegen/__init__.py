"""Operations code generator

Generates typed models and clients (Go, Python) and models (C#) for the
operations of an API from their JSON Schemas, and ships the async runtime
client the generated Python code builds on.
"""

__version__ = "1.0.0"

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode, TemplateConfig
from .errors import (
    CodegenError,
    CyclicTemplateDependency,
    FormatterFailure,
    InvalidOutput,
    TemplateExecutionError,
    UnhandledExecutionEngine,
    UnresolvedReference,
)
from .formatters import OutputFormatter
from .generation import Template, TemplateExecutor, client_templates, model_templates
from .model import ExecutionEngine, GenerationConfig, Operation, OperationKind, OutputFile


def generate(config: GenerationConfig, settings: CodeGeneratorConfig | None = None) -> list[OutputFile]:
    """Generate the models and client of the configured target."""
    settings = settings or CodeGeneratorConfig()
    formatter = OutputFormatter(config=settings.formatter) if settings.formatter.enabled else None
    executor = TemplateExecutor(formatter=formatter, max_workers=settings.max_workers)
    return executor.execute(client_templates(settings.target, settings.template_config), config)


__all__ = [
    "CodeGeneratorConfig",
    "CodegenError",
    "CyclicTemplateDependency",
    "ExecutionEngine",
    "FormatterConfig",
    "FormatterFailure",
    "GenerationConfig",
    "InvalidOutput",
    "Operation",
    "OperationKind",
    "OutputConfig",
    "OutputFile",
    "OutputFormatter",
    "OutputMode",
    "Template",
    "TemplateConfig",
    "TemplateExecutionError",
    "TemplateExecutor",
    "UnhandledExecutionEngine",
    "UnresolvedReference",
    "client_templates",
    "generate",
    "model_templates",
]
