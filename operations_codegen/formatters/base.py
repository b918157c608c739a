"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Formatter(ABC):
    """Abstract base class for code formatters."""

    # Name used in log messages and errors
    name: str = ""

    @abstractmethod
    def run(self, code: str) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format

        Returns:
            Formatted code

        Raises:
            FileNotFoundError: If the tool is not installed
            FormatterFailure: If the tool rejects the code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (tool installed).

        Returns:
            True if the formatter can be used
        """
