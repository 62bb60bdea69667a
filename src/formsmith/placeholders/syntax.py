"""Placeholder syntax definitions and patterns."""

import re
from typing import Pattern

# {{NAME}} delimiters, one character at a time so they can be matched across runs
OPEN_BRACE = "{"
CLOSE_BRACE = "}"

# Characters allowed between the braces while a name is being collected
NAME_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")

# A reassembled placeholder name
NAME_PATTERN: Pattern = re.compile(r"^[A-Z][A-Z0-9_]*$")

# Anything that still looks like a delimiter
RESIDUAL_DELIMITER_PATTERN: Pattern = re.compile(r"\{\{|\}\}")


def is_valid_placeholder_name(name: str) -> bool:
    """
    Check if a placeholder name is valid.

    Valid names are uppercase identifiers: a leading letter followed by
    uppercase letters, digits or underscores.

    Args:
        name: The placeholder name to validate

    Returns:
        True if valid, False otherwise
    """
    return bool(name) and bool(NAME_PATTERN.match(name))


def placeholder_syntax(name: str) -> str:
    """Return the template spelling of a placeholder name."""
    return f"{{{{{name}}}}}"


def find_residual_delimiters(text: str) -> list[str]:
    """Return every `{{` or `}}` left in already stripped text."""
    return RESIDUAL_DELIMITER_PATTERN.findall(text)
