"""Data models for the placeholder substitution engine."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class TokenKind(str, Enum):
    """Class of a token in a scanned document."""

    LITERAL = "literal"  # Ordinary text, may hold placeholder fragments
    MARKUP = "markup"  # A structural tag, opaque and never split


class TagRole(str, Enum):
    """What a markup token does to element nesting."""

    OPEN = "open"  # <w:r>
    CLOSE = "close"  # </w:r>
    EMPTY = "empty"  # <w:br/> or an HTML void element
    OPAQUE = "opaque"  # <?xml ...?>, <!-- -->, <![CDATA[ ]]>, <!DOCTYPE>


class Token(BaseModel):
    """A maximal run of literal text or a single markup tag."""

    kind: TokenKind
    text: str  # Exact source text
    tag: Optional[str] = None  # Element name for open/close/empty markup
    role: Optional[TagRole] = None  # Only set for markup
    placeholder: Optional[str] = None  # Name of the placeholder a literal replaced

    @property
    def is_markup(self) -> bool:
        return self.kind == TokenKind.MARKUP


class Placeholder(BaseModel):
    """A placeholder found in a document, reassembled across markup."""

    name: str  # The placeholder name (e.g., "BANK_NAME")
    syntax: str  # Reassembled spelling (e.g., "{{BANK_NAME}}")
    source: str  # Exact source text of the span, markup included
    fragmented: bool = False  # Markup interrupted the placeholder
    start_token: int = 0  # Index of the token holding the opening brace
    end_token: int = 0  # Index of the token holding the closing brace


class BindingType(str, Enum):
    """Declared type of a bound value, selects the formatting rule."""

    TEXT = "text"
    DATE = "date"
    CURRENCY = "currency"


class TypedValue(BaseModel):
    """A raw binding value that still needs formatting."""

    value: Any = None
    type: BindingType = BindingType.TEXT


BindingValue = Union[str, TypedValue]


class ResolvedDocument(BaseModel):
    """Result of resolving placeholders in a document."""

    tokens: list[Token] = Field(default_factory=list)
    resolved: list[str] = Field(default_factory=list)  # Names substituted, first-seen order
    unresolved: list[str] = Field(default_factory=list)  # Names with no binding, first-seen order

    @property
    def text(self) -> str:
        return "".join(token.text for token in self.tokens)


class TemplateCheck(BaseModel):
    """Result of checking a template's placeholders against expected names."""

    placeholders: list[str] = Field(default_factory=list)
    fragmented: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)  # Expected but absent from the template
    unknown: list[str] = Field(default_factory=list)  # In the template but not expected

    @property
    def valid(self) -> bool:
        return not self.unknown


class MarkupParseError(ValueError):
    """Exception raised when a document's markup is malformed."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"{message} at offset {position}")


class IllegalCharacterInValue(ValueError):
    """Exception raised when a bound value cannot be represented in the markup."""

    def __init__(self, name: Optional[str], character: str):
        self.name = name
        self.character = character
        where = f" for placeholder '{name}'" if name else ""
        super().__init__(
            f"Value{where} contains character U+{ord(character):04X} "
            "which cannot be represented in the document"
        )
