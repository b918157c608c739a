"""
Configuration for the code generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling."""

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = True

    # Line length for formatters that accept one (ruff)
    line_length: int = 100

    # Seconds to wait for a formatter process
    timeout: float = 30.0


@dataclass(frozen=True)
class TemplateConfig:
    """Configuration shared by the templates of one target."""

    # Go package / C# namespace of the generated files
    package_name: str = "client"


@dataclass
class CodeGeneratorConfig:
    """Configuration options for a generation run."""

    # Target language (go, python or csharp)
    target: str = "go"

    # Package / namespace of the generated files
    package_name: str = "client"

    # Worker threads for templates and formatters (None = executor default)
    max_workers: int | None = None

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def template_config(self) -> TemplateConfig:
        return TemplateConfig(package_name=self.package_name)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(mode=mode, atomic_write=v.get("atomic_write", True))
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "target": self.target,
            "package_name": self.package_name,
            "max_workers": self.max_workers,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "timeout": self.formatter.timeout,
            },
            "output": {
                "mode": self.output.mode.value,
                "atomic_write": self.output.atomic_write,
            },
        }
