"""
Template executor.

Resolves the dependency graph of the root templates, runs every template on
a thread pool and merges the outputs per path. The merge order is the
resolution order (dependencies first, siblings as declared), never the order
in which templates finish.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from ..errors import CodegenError, CyclicTemplateDependency, TemplateExecutionError
from ..formatters import OutputFormatter
from ..model import GenerationConfig, OutputFile
from .template import Template

logger = logging.getLogger(__name__)


def resolve_templates(roots: Sequence[Template]) -> list[Template]:
    """
    Topologically sort the templates reachable from the roots.

    Depth-first post-order: every template comes after its dependencies and
    appears once, at its first position.

    Raises:
        CyclicTemplateDependency: If the dependencies form a cycle
    """
    ordered: list[Template] = []
    done: set[Template] = set()
    visiting: list[Template] = []

    def visit(template: Template) -> None:
        if template in done:
            return
        if template in visiting:
            cycle = visiting[visiting.index(template) :] + [template]
            raise CyclicTemplateDependency([t.name for t in cycle])
        visiting.append(template)
        for dependency in template.dependencies():
            visit(dependency)
        visiting.pop()
        done.add(template)
        ordered.append(template)

    for root in roots:
        visit(root)
    return ordered


def merge_outputs(outputs: Iterable[OutputFile]) -> list[OutputFile]:
    """
    Merge the contributions made to each path.

    Paths keep the order of their first contribution. Blank contributions are
    dropped, the others are separated by a blank line and the result ends
    with a newline. The first non-empty header wins.
    """
    contents: dict[str, list[str]] = {}
    headers: dict[str, str | None] = {}
    for output in outputs:
        parts = contents.setdefault(output.path, [])
        if not headers.get(output.path) and output.header:
            headers[output.path] = output.header
        if output.content.strip():
            parts.append(output.content.strip("\n"))

    merged = []
    for path, parts in contents.items():
        content = "\n\n".join(parts) + "\n" if parts else ""
        merged.append(OutputFile(path=path, content=content, header=headers.get(path)))
    return merged


class TemplateExecutor:
    """Runs templates and their dependencies into merged, formatted output files."""

    def __init__(self, formatter: OutputFormatter | None = None, max_workers: int | None = None):
        """
        Args:
            formatter: Formatter applied to each merged file, None to skip formatting
            max_workers: Size of the thread pools (None = ThreadPoolExecutor default)
        """
        self.formatter = formatter
        self.max_workers = max_workers

    def resolve(self, roots: Sequence[Template]) -> list[Template]:
        return resolve_templates(roots)

    def execute(self, roots: Sequence[Template], config: GenerationConfig) -> list[OutputFile]:
        """
        Generate the output files of the roots and their dependencies.

        Raises:
            CodegenError: The first failure in resolution order, with the
                failing template's name in ``template``
        """
        templates = self.resolve(roots)
        logger.debug("Running %d templates: %s", len(templates), ", ".join(t.name for t in templates))

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(template.generate, config) for template in templates]
            outputs: list[OutputFile] = []
            for template, future in zip(templates, futures):
                try:
                    outputs.extend(future.result())
                except CodegenError as e:
                    if e.template is None:
                        e.template = template.name
                    e.add_note(f"raised by template {template.name}")
                    raise
                except Exception as e:
                    raise TemplateExecutionError(template.name, e) from e

            merged = merge_outputs(outputs)
            if self.formatter is None:
                return merged
            return list(pool.map(self._format, merged))

    def _format(self, output: OutputFile) -> OutputFile:
        return replace(output, content=self.formatter.format(output.path, output.content))
