"""
Naming and text helpers shared by the generators.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

_NON_IDENTIFIER = re.compile(r"\W")

_LINE_SPLIT = re.compile(r"\r?\n")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, slashes) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace("/", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, path-like or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "users/update" -> "UsersUpdate"
        "users_updateInput" -> "UsersUpdateInput"
        "ABC" -> "Abc"
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    return "".join(word.capitalize() for word in words if word)


def snake_case(text: str) -> str:
    """Convert any of the forms accepted by snake_to_pascal_case to snake_case.

    Examples:
        "users/update" -> "users_update"
        "getUser" -> "get_user"
    """
    words = _split_into_words(_normalize_separators(text))
    return "_".join(word.lower() for word in words if word)


def capitalize_first_char(name: str) -> str:
    """Upper-case the first character only, keeping the rest verbatim."""
    return name[:1].upper() + name[1:]


def sanitize_identifier(name: str) -> str:
    """Replace every character that cannot appear in an identifier by an underscore."""
    sanitized = _NON_IDENTIFIER.sub("_", name)
    if not sanitized or sanitized[0].isdigit():
        sanitized = "_" + sanitized
    return sanitized


def linefy(code: str) -> str:
    """Prefix each line of code with its 1-based line number.

    Lines are split on \\r?\\n and joined back with \\n, so the result is
    stable whatever line endings the generated code used.
    """
    return "\n".join(f"{idx}: {line}" for idx, line in enumerate(_LINE_SPLIT.split(code), start=1))
