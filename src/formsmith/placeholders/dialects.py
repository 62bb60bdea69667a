"""Markup dialects: tag recognition and literal-text escaping.

A dialect tells the scanner how tags are spelled in the host format and
tells the resolver how to write a value into literal text without breaking
the document.
"""

import re
from typing import Optional, Pattern

from .models import IllegalCharacterInValue, TagRole

# Opaque constructs: (opening, terminator)
OPAQUE_CONSTRUCTS: tuple[tuple[str, str], ...] = (
    ("<!--", "-->"),
    ("<![CDATA[", "]]>"),
    ("<?", "?>"),
    ("<!", ">"),
)

TAG_NAME_PATTERN: Pattern = re.compile(r"</?\s*([^\W\d][\w.\-:]*)")

# Characters outside the XML 1.0 Char production
XML_ILLEGAL_PATTERN: Pattern = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]"
)


class MarkupDialect:
    """Base dialect for tag-based markup."""

    name = "markup"
    case_sensitive = True
    # Treat a "<" that cannot start a tag as text instead of failing
    lenient_lt = False
    void_elements: frozenset[str] = frozenset()

    def tag_name(self, tag_text: str) -> Optional[str]:
        """Return the element name of a tag, or None if it has none."""
        match = TAG_NAME_PATTERN.match(tag_text)
        if not match:
            return None
        name = match.group(1)
        return name if self.case_sensitive else name.lower()

    def tag_role(self, tag_text: str) -> TagRole:
        """Classify a complete tag by its effect on nesting."""
        for opening, _ in OPAQUE_CONSTRUCTS:
            if tag_text.startswith(opening):
                return TagRole.OPAQUE
        if tag_text.startswith("</"):
            return TagRole.CLOSE
        if tag_text.endswith("/>"):
            return TagRole.EMPTY
        name = self.tag_name(tag_text)
        if name is not None and name in self.void_elements:
            return TagRole.EMPTY
        return TagRole.OPEN

    def escape_text(self, value: str, name: Optional[str] = None) -> str:
        """Escape a value for insertion as literal text."""
        illegal = XML_ILLEGAL_PATTERN.search(value)
        if illegal:
            raise IllegalCharacterInValue(name, illegal.group(0))
        return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class XmlDialect(MarkupDialect):
    """XML and XML-based document parts (WordprocessingML, ODF)."""

    name = "xml"


class HtmlDialect(MarkupDialect):
    """HTML, where names are case-insensitive and void elements never close."""

    name = "html"
    case_sensitive = False
    lenient_lt = True
    void_elements = frozenset(
        {
            "area",
            "base",
            "br",
            "col",
            "embed",
            "hr",
            "img",
            "input",
            "link",
            "meta",
            "source",
            "track",
            "wbr",
        }
    )


DIALECTS: dict[str, type[MarkupDialect]] = {
    XmlDialect.name: XmlDialect,
    HtmlDialect.name: HtmlDialect,
}


def get_dialect(name: str) -> MarkupDialect:
    """Look up a dialect by name."""
    try:
        return DIALECTS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown markup dialect: {name} (expected one of {', '.join(sorted(DIALECTS))})"
        )
