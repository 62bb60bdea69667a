"""Resolver for substituting bound values into placeholder markup."""

import logging
from typing import Mapping, Optional

from .dialects import MarkupDialect, XmlDialect
from .formatting import ValueFormatter
from .models import (
    BindingValue,
    MarkupParseError,
    ResolvedDocument,
    TagRole,
    Token,
    TokenKind,
)
from .parser import PlaceholderParser

logger = logging.getLogger(__name__)


def is_depth_neutral(markup: list[Token]) -> bool:
    """
    Check whether a run of markup closes exactly the elements it reopens.

    `</w:t></w:r><w:r><w:t>` is depth-neutral: removing it leaves the
    surrounding elements balanced.
    """
    opened: list[Optional[str]] = []
    closed: list[Optional[str]] = []
    for token in markup:
        if token.role == TagRole.OPEN:
            opened.append(token.tag)
        elif token.role == TagRole.CLOSE:
            if opened:
                opened.pop()
            else:
                closed.append(token.tag)
    return closed == opened[::-1]


def _append(output: list[Token], token: Token) -> None:
    """Append a token, merging plain literal text with its neighbour."""
    if (
        token.kind == TokenKind.LITERAL
        and token.placeholder is None
        and output
        and output[-1].kind == TokenKind.LITERAL
        and output[-1].placeholder is None
    ):
        output[-1] = Token(kind=TokenKind.LITERAL, text=output[-1].text + token.text)
    else:
        output.append(token)


class PlaceholderResolver:
    """Replace `{{NAME}}` placeholders in markup with bound values."""

    def __init__(
        self,
        dialect: Optional[MarkupDialect] = None,
        formatter: Optional[ValueFormatter] = None,
    ):
        """
        Initialize the resolver.

        Args:
            dialect: Markup dialect of the documents (XML if not provided)
            formatter: Formatter for typed bindings (default grouping if not provided)
        """
        self.dialect = dialect or XmlDialect()
        self.parser = PlaceholderParser(self.dialect)
        self.formatter = formatter or ValueFormatter()

    def resolve(
        self, raw_text: str, bindings: Mapping[str, BindingValue]
    ) -> tuple[str, list[str]]:
        """
        Resolve all placeholders in a document.

        Args:
            raw_text: The markup with placeholders
            bindings: Placeholder name to value (plain string or TypedValue)

        Returns:
            Tuple of (resolved markup, names left unresolved)

        Raises:
            MarkupParseError: If the markup is malformed
            IllegalCharacterInValue: If a used value cannot be escaped
        """
        document = self.resolve_document(raw_text, bindings)
        return document.text, document.unresolved

    def resolve_bytes(
        self,
        raw: bytes,
        bindings: Mapping[str, BindingValue],
        encoding: str = "utf-8",
    ) -> tuple[bytes, list[str]]:
        """Resolve an encoded document part and return it re-encoded."""
        try:
            raw_text = raw.decode(encoding)
        except UnicodeDecodeError as e:
            raise MarkupParseError(f"Document is not valid {encoding}", e.start) from e

        text, unresolved = self.resolve(raw_text, bindings)
        return text.encode(encoding), unresolved

    def resolve_document(
        self, raw_text: str, bindings: Mapping[str, BindingValue]
    ) -> ResolvedDocument:
        """Resolve a document and return the full token-level result."""
        if not raw_text:
            return ResolvedDocument()

        tokens = self.parser.scanner.scan(raw_text)
        return self.resolve_tokens(tokens, bindings)

    def resolve_tokens(
        self, tokens: list[Token], bindings: Mapping[str, BindingValue]
    ) -> ResolvedDocument:
        """
        Resolve placeholders over an already scanned token sequence.

        A bound placeholder collapses to one literal token holding the
        escaped value. Markup inside the span is dropped when it is
        depth-neutral and otherwise kept, in order, after the value.
        An unbound placeholder keeps its source text exactly.
        """
        output: list[Token] = []
        resolved: list[str] = []
        unresolved: list[str] = []
        rendered: dict[str, str] = {}

        for segment in self.parser.walk(tokens):
            if segment.match is None:
                _append(output, segment.token)
                continue

            match = segment.match
            if match.name not in bindings:
                logger.debug(f"No binding for placeholder {match.name}")
                for token in match.source_tokens:
                    _append(output, token)
                if match.name not in unresolved:
                    unresolved.append(match.name)
                continue

            if match.name not in rendered:
                text = self.formatter.render(bindings[match.name])
                rendered[match.name] = self.dialect.escape_text(text, match.name)

            output.append(
                Token(kind=TokenKind.LITERAL, text=rendered[match.name], placeholder=match.name)
            )
            interior = match.interior
            if interior and not is_depth_neutral(interior):
                logger.debug(f"Keeping unbalanced markup inside placeholder {match.name}")
                output.extend(interior)

            if match.name not in resolved:
                resolved.append(match.name)

        if unresolved:
            logger.info(f"Unresolved placeholders: {', '.join(unresolved)}")

        return ResolvedDocument(tokens=output, resolved=resolved, unresolved=unresolved)
