"""Parser for reassembling placeholders from scanned markup."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from .dialects import MarkupDialect
from .models import Placeholder, TemplateCheck, Token, TokenKind
from .scanner import MarkupScanner
from .syntax import (
    CLOSE_BRACE,
    NAME_CHARS,
    OPEN_BRACE,
    is_valid_placeholder_name,
    placeholder_syntax,
)

logger = logging.getLogger(__name__)


class RecognizerState(str, Enum):
    """State of the placeholder recognizer."""

    SEARCHING = "searching"  # Looking for an opening brace
    OPENING = "opening"  # One "{" seen
    COLLECTING = "collecting"  # Inside "{{", accumulating the name
    CLOSING = "closing"  # One "}" seen after the name


@dataclass
class PlaceholderMatch:
    """A complete placeholder span found by the recognizer."""

    name: str
    source_tokens: list[Token]  # The span as it appears in the source, markup included
    start_token: int
    end_token: int

    @property
    def interior(self) -> list[Token]:
        """Markup tokens that fell between the braces."""
        return [token for token in self.source_tokens if token.is_markup]

    @property
    def fragmented(self) -> bool:
        return bool(self.interior)

    @property
    def source(self) -> str:
        return "".join(token.text for token in self.source_tokens)


@dataclass
class Segment:
    """One piece of recognizer output: a pass-through token or a placeholder."""

    token: Optional[Token] = None
    match: Optional[PlaceholderMatch] = None


@dataclass
class _Cursor:
    token: int = 0
    offset: int = 0
    start: tuple[int, int] = (0, 0)
    name: list[str] = field(default_factory=list)


def _literal(text: str) -> Segment:
    return Segment(token=Token(kind=TokenKind.LITERAL, text=text))


class PlaceholderParser:
    """Find placeholders in markup, including ones split across tags."""

    def __init__(self, dialect: Optional[MarkupDialect] = None):
        self.scanner = MarkupScanner(dialect)

    def walk(self, tokens: list[Token]) -> Iterator[Segment]:
        """
        Run the placeholder recognizer over a token sequence.

        Text and markup outside placeholders are yielded unchanged, in order.
        Markup met while a placeholder is open is skipped and kept with the
        match. When a character outside the name alphabet interrupts an
        attempt, the attempt is abandoned: its opening brace is yielded as
        text and recognition resumes right after it, so consumed text and
        markup are replayed verbatim.

        Args:
            tokens: Tokens produced by MarkupScanner.scan

        Yields:
            Segment objects covering the whole input
        """
        state = RecognizerState.SEARCHING
        cursor = _Cursor()
        count = len(tokens)

        while True:
            if cursor.token >= count:
                if state == RecognizerState.SEARCHING:
                    return
                yield from self._abandon(cursor, "end of input")
                state = RecognizerState.SEARCHING
                continue

            token = tokens[cursor.token]
            if token.is_markup:
                if state == RecognizerState.SEARCHING:
                    yield Segment(token=token)
                cursor.token += 1
                cursor.offset = 0
                continue

            text = token.text
            if cursor.offset >= len(text):
                cursor.token += 1
                cursor.offset = 0
                continue

            if state == RecognizerState.SEARCHING:
                brace = text.find(OPEN_BRACE, cursor.offset)
                if brace == -1:
                    yield _literal(text[cursor.offset:])
                    cursor.token += 1
                    cursor.offset = 0
                    continue
                if brace > cursor.offset:
                    yield _literal(text[cursor.offset:brace])
                cursor.start = (cursor.token, brace)
                cursor.name = []
                cursor.offset = brace + 1
                state = RecognizerState.OPENING
                continue

            char = text[cursor.offset]
            cursor.offset += 1

            if state == RecognizerState.OPENING and char == OPEN_BRACE:
                state = RecognizerState.COLLECTING
                continue

            if state == RecognizerState.COLLECTING:
                if char in NAME_CHARS:
                    cursor.name.append(char)
                    continue
                if char == CLOSE_BRACE:
                    state = RecognizerState.CLOSING
                    continue

            if state == RecognizerState.CLOSING and char == CLOSE_BRACE:
                name = "".join(cursor.name)
                if is_valid_placeholder_name(name):
                    yield Segment(match=self._build_match(tokens, cursor, name))
                    state = RecognizerState.SEARCHING
                    continue

            yield from self._abandon(cursor, repr(char))
            state = RecognizerState.SEARCHING

    def _abandon(self, cursor: _Cursor, reason: str) -> Iterator[Segment]:
        """Give up on the current attempt and rewind past its opening brace."""
        start_token, start_offset = cursor.start
        logger.debug(
            f"Abandoned placeholder at token {start_token} offset {start_offset}: {reason}"
        )
        yield _literal(OPEN_BRACE)
        cursor.token = start_token
        cursor.offset = start_offset + 1
        cursor.name = []

    def _build_match(self, tokens: list[Token], cursor: _Cursor, name: str) -> PlaceholderMatch:
        """Collect the source tokens between the opening brace and the cursor."""
        start_token, start_offset = cursor.start
        end_token, end_offset = cursor.token, cursor.offset

        if start_token == end_token:
            source = [
                Token(
                    kind=TokenKind.LITERAL,
                    text=tokens[start_token].text[start_offset:end_offset],
                )
            ]
        else:
            source = [Token(kind=TokenKind.LITERAL, text=tokens[start_token].text[start_offset:])]
            source.extend(tokens[start_token + 1 : end_token])
            source.append(Token(kind=TokenKind.LITERAL, text=tokens[end_token].text[:end_offset]))

        return PlaceholderMatch(
            name=name,
            source_tokens=source,
            start_token=start_token,
            end_token=end_token,
        )

    def extract_placeholders(self, raw_text: str) -> list[Placeholder]:
        """
        Extract all placeholders from a document.

        Args:
            raw_text: The markup to parse

        Returns:
            List of Placeholder objects in document order

        Raises:
            MarkupParseError: If the markup is malformed
        """
        placeholders = []
        if not raw_text:
            return placeholders

        for segment in self.walk(self.scanner.scan(raw_text)):
            if segment.match is None:
                continue
            match = segment.match
            placeholders.append(
                Placeholder(
                    name=match.name,
                    syntax=placeholder_syntax(match.name),
                    source=match.source,
                    fragmented=match.fragmented,
                    start_token=match.start_token,
                    end_token=match.end_token,
                )
            )
            logger.debug(
                f"Found placeholder: {match.name} (fragmented: {match.fragmented})"
            )

        return placeholders

    def validate_template(
        self, raw_text: str, expected_names: Optional[Iterable[str]] = None
    ) -> TemplateCheck:
        """
        Check a template's placeholders against the names a schema provides.

        Args:
            raw_text: The template markup
            expected_names: Names the caller can bind, or None to skip the comparison

        Returns:
            TemplateCheck listing found, fragmented, missing and unknown names
        """
        placeholders = self.extract_placeholders(raw_text)

        names: list[str] = []
        fragmented: list[str] = []
        for placeholder in placeholders:
            if placeholder.name not in names:
                names.append(placeholder.name)
            if placeholder.fragmented and placeholder.name not in fragmented:
                fragmented.append(placeholder.name)

        check = TemplateCheck(placeholders=names, fragmented=fragmented)
        if expected_names is not None:
            expected = list(expected_names)
            check.missing = [name for name in expected if name not in names]
            check.unknown = [name for name in names if name not in expected]

        return check
