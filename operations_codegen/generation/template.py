"""
The Template interface.

A template turns a GenerationConfig into output files and may depend on
other templates whose contributions to the same paths must come first.
Templates are values: two instances of the same class with equal
configuration are the same template, which is how the executor avoids
running a shared dependency twice.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import GenerationConfig, OutputFile


class Template(ABC):
    """A generation unit. Implementations must be hashable, stateless and pure."""

    @abstractmethod
    def generate(self, config: GenerationConfig) -> list[OutputFile]:
        """
        Produce this template's output files.

        Calling generate twice with equal configs must give identical output.
        """

    def dependencies(self) -> list[Template]:
        """Templates whose outputs are merged before this one's."""
        return []

    @property
    def name(self) -> str:
        return type(self).__name__
