"""Scanner that splits raw markup into literal and markup tokens."""

import logging
from typing import Optional

from .dialects import OPAQUE_CONSTRUCTS, MarkupDialect, XmlDialect
from .models import MarkupParseError, TagRole, Token, TokenKind

logger = logging.getLogger(__name__)

# Characters other than letters that may follow "<" in markup
TAG_START_PUNCTUATION = frozenset("/!?_:")


def can_start_tag(char: str) -> bool:
    """Return whether the character after "<" begins markup rather than text."""
    return char in TAG_START_PUNCTUATION or char.isalpha()


class MarkupScanner:
    """Tokenize structured markup without building a document tree."""

    def __init__(self, dialect: Optional[MarkupDialect] = None):
        self.dialect = dialect or XmlDialect()

    def scan(self, raw_text: str) -> list[Token]:
        """
        Split raw markup into an ordered list of tokens.

        Literal runs are kept maximal; each tag becomes one markup token and
        is never split. Element nesting is checked as the text is scanned.

        Args:
            raw_text: The document text to scan

        Returns:
            List of Token objects whose texts concatenate back to raw_text

        Raises:
            MarkupParseError: If a tag is unterminated or elements are unbalanced
        """
        tokens: list[Token] = []
        open_elements: list[tuple[str, int]] = []
        text_start = 0
        pos = 0
        length = len(raw_text)

        while pos < length:
            lt = raw_text.find("<", pos)
            if lt == -1:
                break

            if lt + 1 >= length or not can_start_tag(raw_text[lt + 1]):
                if self.dialect.lenient_lt:
                    pos = lt + 1
                    continue
                raise MarkupParseError("Unescaped '<' in text", lt)

            if lt > text_start:
                tokens.append(Token(kind=TokenKind.LITERAL, text=raw_text[text_start:lt]))

            end = self._tag_end(raw_text, lt)
            token = self._markup_token(raw_text[lt:end], lt)

            if token.role == TagRole.OPEN:
                open_elements.append((token.tag, lt))
            elif token.role == TagRole.CLOSE:
                if not open_elements:
                    raise MarkupParseError(f"Unexpected closing tag </{token.tag}>", lt)
                expected, _ = open_elements[-1]
                if expected != token.tag:
                    raise MarkupParseError(
                        f"Closing tag </{token.tag}> does not match <{expected}>", lt
                    )
                open_elements.pop()

            tokens.append(token)
            pos = text_start = end

        if text_start < length:
            tokens.append(Token(kind=TokenKind.LITERAL, text=raw_text[text_start:]))

        if open_elements:
            name, position = open_elements[-1]
            raise MarkupParseError(f"Unclosed element <{name}>", position)

        logger.debug(f"Scanned {len(tokens)} tokens from {length} characters")
        return tokens

    def _markup_token(self, tag_text: str, position: int) -> Token:
        """Build a markup token for one complete tag."""
        role = self.dialect.tag_role(tag_text)
        if role == TagRole.OPAQUE:
            return Token(kind=TokenKind.MARKUP, text=tag_text, role=role)

        name = self.dialect.tag_name(tag_text)
        if name is None:
            raise MarkupParseError(f"Invalid tag {tag_text!r}", position)
        return Token(kind=TokenKind.MARKUP, text=tag_text, tag=name, role=role)

    def _tag_end(self, raw_text: str, start: int) -> int:
        """Return the offset just past the tag that begins at start."""
        for opening, terminator in OPAQUE_CONSTRUCTS:
            if raw_text.startswith(opening, start):
                end = raw_text.find(terminator, start + len(opening))
                if end == -1:
                    raise MarkupParseError(f"Unterminated {opening!r} construct", start)
                return end + len(terminator)

        quote: Optional[str] = None
        for index in range(start + 1, len(raw_text)):
            char = raw_text[index]
            if quote:
                if char == quote:
                    quote = None
            elif char in ("'", '"'):
                quote = char
            elif char == ">":
                return index + 1
            elif char == "<":
                raise MarkupParseError("Unterminated tag", start)

        raise MarkupParseError("Unterminated tag", start)
