"""
Formatters running an external tool: content on stdin, formatted content on stdout.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from ..errors import FormatterFailure
from .base import Formatter

logger = logging.getLogger(__name__)


class ExternalFormatter(Formatter):
    """Formatter piping code through a command."""

    def __init__(self, command: list[str], timeout: float = 30.0):
        self.command = list(command)
        self.timeout = timeout
        self.name = self.command[0]
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Check if the tool is on the PATH."""
        if self._available is None:
            self._available = shutil.which(self.name) is not None
        return self._available

    def run(self, code: str) -> str:
        logger.debug("Running %s", " ".join(self.command))
        try:
            result = subprocess.run(
                self.command,
                input=code,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            self._available = False
            raise
        except subprocess.TimeoutExpired as e:
            raise FormatterFailure(self.name, code, f"timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise FormatterFailure(self.name, code, result.stderr)
        return result.stdout

    def __repr__(self) -> str:
        return f"ExternalFormatter({self.command!r})"


def gofmt_formatter(timeout: float = 30.0) -> ExternalFormatter:
    """gofmt reading Go source from stdin."""
    return ExternalFormatter(["gofmt"], timeout=timeout)


def ruff_formatter(line_length: int = 100, timeout: float = 30.0) -> ExternalFormatter:
    """ruff format reading Python source from stdin."""
    cmd = ["ruff", "format", "--stdin-filename", "code.py"]
    if line_length:
        cmd.extend(["--line-length", str(line_length)])
    return ExternalFormatter(cmd, timeout=timeout)
