"""
Atomic file writer for generated code.

Ensures that an interrupted run never leaves a generated file in an
incomplete state.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from .config import OutputConfig, OutputMode
from .errors import InvalidOutput
from .model import OutputFile

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validators: dict[str, Callable[[str], None]] | None = None):
        """
        Args:
            validators: Validation functions by file suffix, replacing the defaults
        """
        self._validators = {
            ".py": validate_python,
            ".go": validate_braces,
            ".cs": validate_braces,
        }
        if validators is not None:
            self._validators = dict(validators)

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Raises:
            InvalidOutput: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(path, content)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def _validate(self, path: Path, content: str) -> None:
        validator = self._validators.get(path.suffix)
        if validator is not None:
            validator(content)


def validate_python(content: str) -> None:
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise InvalidOutput(f"Generated Python code is not valid: {e}") from e


def validate_braces(content: str) -> None:
    """Structural check for brace languages (no full parsing)."""
    open_braces = content.count("{")
    close_braces = content.count("}")
    if open_braces != close_braces:
        raise InvalidOutput(f"Generated code has unbalanced braces: {open_braces} open, {close_braces} close")


def write_outputs(
    files: Iterable[OutputFile],
    output_dir: Path,
    config: OutputConfig | None = None,
    writer: AtomicWriter | None = None,
) -> list[Path]:
    """
    Write generated files below a directory.

    Returns:
        The written paths, in output order

    Raises:
        FileExistsError: If a file exists and the mode is not FORCE
    """
    config = config or OutputConfig()
    writer = writer or AtomicWriter()
    files = list(files)

    # Check everything first so that a refused run writes nothing
    if config.mode is OutputMode.ERROR_IF_EXISTS:
        for output in files:
            path = output_dir / output.path
            if path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

    written = []
    for output in files:
        path = output_dir / output.path
        content = output.render()
        if config.atomic_write:
            writer.write(path, content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", path)
        written.append(path)
    return written
