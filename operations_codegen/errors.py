"""
Errors raised while generating code.

Every fatal generation failure derives from CodegenError. Recoverable
conditions (an anonymous type degraded to a dynamic one, a formatter that is
not installed) are logged instead of raised.
"""

from __future__ import annotations

from .utils import linefy


class CodegenError(Exception):
    """Base class for generation failures.

    The executor records the name of the failing template in ``template``.
    """

    template: str | None = None


class UnresolvedReference(CodegenError):
    """A $ref names a definition that does not exist."""

    def __init__(self, ref: str, source_path: str = ""):
        self.ref = ref
        self.source_path = source_path
        location = f" at {source_path}" if source_path else ""
        super().__init__(f"unresolved reference '{ref}'{location}")


class UnhandledExecutionEngine(CodegenError):
    """An operation uses an execution engine with no response schema extraction rule."""

    def __init__(self, operation_name: str, engine: object):
        self.operation_name = operation_name
        self.engine = engine
        super().__init__(f"unhandled operation engine {engine!r} for operation '{operation_name}'")


class CyclicTemplateDependency(CodegenError):
    """Template dependencies form a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("cyclic template dependency: " + " -> ".join(cycle))


class TemplateExecutionError(CodegenError):
    """A template failed with an error that is not a CodegenError."""

    def __init__(self, template: str, cause: BaseException):
        self.template = template
        super().__init__(f"template {template} failed: {cause}")


class FormatterFailure(CodegenError):
    """An installed formatter rejected the generated code."""

    def __init__(self, tool: str, content: str, stderr: str, path: str = ""):
        self.tool = tool
        self.content = content
        self.stderr = stderr
        self.path = path
        super().__init__(str(self))

    def __str__(self) -> str:
        target = f" {self.path}" if self.path else ""
        return f"{self.tool} failed to format{target}:\n{linefy(self.content)}\n\n{self.stderr}"


class InvalidOutput(CodegenError):
    """A generated file failed validation before being written."""
