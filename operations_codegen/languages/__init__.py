"""
Target languages and their type mappers.
"""

from __future__ import annotations

from functools import cache

from ..schema import SchemaKind
from .base import MappedField, ModelEmitter, TargetLanguage, TypeMapper
from .csharp import CSharpLanguage, CSharpTypeMapper
from .go import GoLanguage, GoTypeMapper
from .python import PythonLanguage, PythonTypeMapper

LANGUAGES: dict[str, type[TargetLanguage]] = {
    "go": GoLanguage,
    "python": PythonLanguage,
    "csharp": CSharpLanguage,
}

# Alternative names accepted for LANGUAGES keys
ALIASES = {
    "golang": "go",
    "py": "python",
    "cs": "csharp",
}


@cache
def get_language(name: str) -> TargetLanguage:
    """Return the (shared, stateless) target language registered under a name or alias."""
    key = name.lower()
    key = ALIASES.get(key, key)
    if key not in LANGUAGES:
        raise ValueError(f"Language not supported: {name}")
    return LANGUAGES[key]()


def map_type(
    kind: SchemaKind,
    field_name: str,
    is_required: bool,
    is_array: bool,
    language: str,
    type_name: str | None = None,
) -> tuple[str, str]:
    """Map a field to (type syntax, serialization tag) in the given language."""
    mapped = get_language(language).mapper.map_field(kind, field_name, is_required, is_array, type_name)
    return mapped.type_syntax, mapped.tag


__all__ = [
    "LANGUAGES",
    "get_language",
    "map_type",
    "MappedField",
    "ModelEmitter",
    "TargetLanguage",
    "TypeMapper",
    "GoLanguage",
    "GoTypeMapper",
    "PythonLanguage",
    "PythonTypeMapper",
    "CSharpLanguage",
    "CSharpTypeMapper",
]
