"""Placeholder substitution over run-fragmented markup.

This module scans structured markup into literal and markup tokens,
reassembles `{{NAME}}` placeholders that the authoring tool split across
tags, and substitutes bound values while leaving everything else untouched.
"""

from .models import (
    BindingType,
    BindingValue,
    IllegalCharacterInValue,
    MarkupParseError,
    Placeholder,
    ResolvedDocument,
    TagRole,
    TemplateCheck,
    Token,
    TokenKind,
    TypedValue,
)
from .dialects import HtmlDialect, MarkupDialect, XmlDialect, get_dialect
from .scanner import MarkupScanner
from .parser import PlaceholderParser
from .formatting import ValueFormatter
from .resolver import PlaceholderResolver

__all__ = [
    "BindingType",
    "BindingValue",
    "IllegalCharacterInValue",
    "MarkupParseError",
    "Placeholder",
    "ResolvedDocument",
    "TagRole",
    "TemplateCheck",
    "Token",
    "TokenKind",
    "TypedValue",
    "HtmlDialect",
    "MarkupDialect",
    "XmlDialect",
    "get_dialect",
    "MarkupScanner",
    "PlaceholderParser",
    "ValueFormatter",
    "PlaceholderResolver",
]
