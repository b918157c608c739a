"""
Post-processing formatters for generated code.

OutputFormatter picks a formatter by file suffix. A formatter that is not
installed leaves the content unformatted with a warning; one that rejects the
content raises FormatterFailure.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import PurePosixPath

from ..config import FormatterConfig
from ..errors import FormatterFailure
from .base import Formatter
from .external import ExternalFormatter, gofmt_formatter, ruff_formatter

logger = logging.getLogger(__name__)


def default_formatters(config: FormatterConfig | None = None) -> dict[str, Formatter]:
    """The formatters shipped for generated files, keyed by suffix."""
    config = config or FormatterConfig()
    return {
        ".go": gofmt_formatter(timeout=config.timeout),
        ".py": ruff_formatter(line_length=config.line_length, timeout=config.timeout),
    }


class OutputFormatter:
    """Formats generated files with the formatter registered for their suffix."""

    def __init__(self, formatters: Mapping[str, Formatter] | None = None, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()
        self.formatters = dict(default_formatters(self.config) if formatters is None else formatters)

    def formatter_for(self, path: str) -> Formatter | None:
        return self.formatters.get(PurePosixPath(path).suffix)

    def format(self, path: str, content: str) -> str:
        """
        Format the content of a generated file.

        Args:
            path: Path of the file, used to pick the formatter
            content: The code to format

        Returns:
            The formatted code, or the content unchanged when formatting is
            disabled, no formatter handles the path or the tool is missing

        Raises:
            FormatterFailure: If the tool rejects the content
        """
        if not self.config.enabled:
            return content
        formatter = self.formatter_for(path)
        if formatter is None:
            return content
        if not formatter.is_available():
            logger.warning("Formatter %s not found, leaving %s unformatted", formatter.name, path)
            return content
        try:
            return formatter.run(content)
        except FileNotFoundError:
            logger.warning("Formatter %s not found, leaving %s unformatted", formatter.name, path)
            return content
        except FormatterFailure as e:
            if not e.path:
                e.path = path
            raise


__all__ = [
    "ExternalFormatter",
    "Formatter",
    "OutputFormatter",
    "default_formatters",
    "gofmt_formatter",
    "ruff_formatter",
]
