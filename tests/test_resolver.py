"""Tests for placeholder resolution."""

import pytest

from formsmith.placeholders import (
    BindingType,
    HtmlDialect,
    IllegalCharacterInValue,
    MarkupParseError,
    MarkupScanner,
    PlaceholderResolver,
    Token,
    TokenKind,
    TypedValue,
    ValueFormatter,
    XmlDialect,
)
from formsmith.placeholders.resolver import is_depth_neutral
from formsmith.placeholders.syntax import find_residual_delimiters


def strip_markup(text: str) -> str:
    """Concatenate the literal text of a document."""
    return "".join(t.text for t in MarkupScanner().scan(text) if not t.is_markup)


def markup(*texts: str) -> list[Token]:
    """Build markup tokens for a sequence of tags."""
    dialect = XmlDialect()
    return [
        Token(
            kind=TokenKind.MARKUP,
            text=text,
            tag=dialect.tag_name(text),
            role=dialect.tag_role(text),
        )
        for text in texts
    ]


class TestDepthNeutral:
    """Test the depth-neutral check on interior markup."""

    def test_run_boundary_is_neutral(self):
        """Test that closing and reopening a run is neutral."""
        tokens = markup(
            "</w:t>", "</w:r>", "<w:proofErr/>", "<w:r>", "<w:rPr>", "<w:b/>", "</w:rPr>", "<w:t>"
        )
        assert is_depth_neutral(tokens)

    def test_paragraph_boundary_is_neutral(self):
        """Test that closing and reopening a paragraph is neutral."""
        tokens = markup("</w:t>", "</w:r>", "</w:p>", "<w:p>", "<w:r>", "<w:t>")
        assert is_depth_neutral(tokens)

    def test_unbalanced_markup(self):
        """Test markup that leaves a different element open."""
        assert not is_depth_neutral(markup("</a>", "<b>"))
        assert not is_depth_neutral(markup("</w:t>", "</w:r>"))
        assert not is_depth_neutral(markup("<w:r>"))

    def test_empty_markup_is_neutral(self):
        """Test that no markup is trivially neutral."""
        assert is_depth_neutral([])


class TestPlaceholderResolver:
    """Test placeholder resolution."""

    def test_identity_without_placeholders(self, resolver):
        """Test that a document without placeholders is returned unchanged."""
        raw = '<?xml version="1.0"?><w:p><w:r><w:t>Nothing to fill</w:t></w:r></w:p>'

        text, unresolved = resolver.resolve(raw, {"NAME": "unused"})

        assert text == raw
        assert unresolved == []

    def test_empty_document(self, resolver):
        """Test that empty input resolves to empty output."""
        document = resolver.resolve_document("", {"NAME": "x"})

        assert document.text == ""
        assert document.resolved == []
        assert document.unresolved == []

    def test_resolve_single_token(self, resolver):
        """Test resolving a placeholder inside one text node."""
        text, unresolved = resolver.resolve("<w:t>Dear {{NAME}},</w:t>", {"NAME": "Asha"})

        assert text == "<w:t>Dear Asha,</w:t>"
        assert unresolved == []

    def test_resolve_fragmented_placeholder(self, resolver):
        """Test that a placeholder split across runs collapses into one run."""
        raw = (
            "<w:p><w:r><w:t>{{BANK_</w:t></w:r><w:proofErr/>"
            "<w:r><w:rPr><w:b/></w:rPr><w:t>NAME}}</w:t></w:r></w:p>"
        )

        text, unresolved = resolver.resolve(raw, {"BANK_NAME": "State Bank of India"})

        assert text == "<w:p><w:r><w:t>State Bank of India</w:t></w:r></w:p>"
        assert unresolved == []

    def test_resolve_keeps_surrounding_text(self, resolver):
        """Test that text before and after a fragmented placeholder survives."""
        raw = (
            '<w:p><w:r><w:t xml:space="preserve">GSTIN: {{</w:t></w:r>'
            "<w:r><w:t>GSTIN}} (active)</w:t></w:r></w:p>"
        )

        text, _ = resolver.resolve(raw, {"GSTIN": "07AABCU9603R1ZM"})

        assert text == (
            '<w:p><w:r><w:t xml:space="preserve">GSTIN: 07AABCU9603R1ZM (active)</w:t></w:r></w:p>'
        )

    def test_resolve_inside_non_ascii_elements(self, resolver):
        """Test resolving where element names use non-ASCII letters."""
        text, unresolved = resolver.resolve("<é>{{NA</é><é>ME}}</é>", {"NAME": "Asha"})

        assert text == "<é>Asha</é>"
        assert unresolved == []

    def test_repeated_placeholder(self, resolver):
        """Test that every occurrence of a name is replaced."""
        text, _ = resolver.resolve("<a>{{X}}-{{X}}</a>", {"X": "1"})

        assert text == "<a>1-1</a>"

    def test_unbound_placeholder_reported_once(self, resolver):
        """Test that an unbound name is left as written and reported once."""
        raw = "<a>{{SEAL_NO}} {{NAME}} {{SEAL_NO}}</a>"

        document = resolver.resolve_document(raw, {"NAME": "Asha"})

        assert document.text == "<a>{{SEAL_NO}} Asha {{SEAL_NO}}</a>"
        assert document.resolved == ["NAME"]
        assert document.unresolved == ["SEAL_NO"]

    def test_unbound_fragmented_placeholder_keeps_markup(self, resolver):
        """Test that an unbound split placeholder keeps its original runs."""
        raw = "<w:r><w:t>{{SEAL_</w:t></w:r><w:r><w:t>NO}}</w:t></w:r>"

        text, unresolved = resolver.resolve(raw, {})

        assert text == raw
        assert unresolved == ["SEAL_NO"]

    def test_no_residual_delimiters_when_all_bound(self, resolver):
        """Test that resolving every name leaves no delimiters in the text."""
        raw = (
            "<w:p><w:r><w:t>{{A}} {</w:t></w:r><w:r><w:t>{B</w:t></w:r>"
            "<w:r><w:t>}} {{C}</w:t></w:r><w:r><w:t>}</w:t></w:r></w:p>"
        )

        text, unresolved = resolver.resolve(raw, {"A": "1", "B": "2", "C": "3"})

        assert unresolved == []
        assert strip_markup(text) == "1 2 3"
        assert find_residual_delimiters(strip_markup(text)) == []

    def test_non_neutral_interior_markup_is_kept(self, resolver):
        """Test that unbalanced markup inside a placeholder stays balanced after it."""
        raw = "<a>{{NA</a><b>ME}}</b>"

        text, _ = resolver.resolve(raw, {"NAME": "value"})

        assert text == "<a>value</a><b></b>"
        MarkupScanner().scan(text)

    def test_invalid_names_left_alone(self, resolver):
        """Test that brace runs that are not placeholders pass through."""
        raw = "<a>{{}} {{lower}} {single} {{1A}}</a>"

        text, unresolved = resolver.resolve(raw, {})

        assert text == raw
        assert unresolved == []

    def test_triple_braces(self, resolver):
        """Test that an extra brace on each side stays in the output."""
        text, _ = resolver.resolve("<a>{{{NAME}}}</a>", {"NAME": "x"})

        assert text == "<a>{x}</a>"

    def test_value_is_escaped(self, resolver):
        """Test that values cannot inject markup."""
        text, _ = resolver.resolve("<a>{{NAME}}</a>", {"NAME": "A & B <Traders>"})

        assert text == "<a>A &amp; B &lt;Traders&gt;</a>"
        MarkupScanner().scan(text)

    def test_value_with_braces_is_not_resolved_again(self, resolver):
        """Test that placeholders inside values are inserted literally."""
        text, unresolved = resolver.resolve("<a>{{A}}</a>", {"A": "{{B}}", "B": "no"})

        assert text == "<a>{{B}}</a>"
        assert unresolved == []

    def test_illegal_character_in_used_value(self, resolver):
        """Test that a control character in a used value is rejected."""
        with pytest.raises(IllegalCharacterInValue) as exc_info:
            resolver.resolve("<a>{{NAME}}</a>", {"NAME": "bad\x00value"})

        assert exc_info.value.name == "NAME"
        assert exc_info.value.character == "\x00"

    def test_illegal_character_in_unused_value(self, resolver):
        """Test that values for names the document lacks are never checked."""
        text, _ = resolver.resolve("<a>{{NAME}}</a>", {"NAME": "ok", "OTHER": "\x01"})

        assert text == "<a>ok</a>"

    def test_tabs_and_newlines_are_allowed(self, resolver):
        """Test that whitespace control characters are valid values."""
        text, _ = resolver.resolve("<a>{{NAME}}</a>", {"NAME": "line1\n\tline2"})

        assert text == "<a>line1\n\tline2</a>"

    def test_malformed_markup(self, resolver):
        """Test that malformed markup is reported with its offset."""
        with pytest.raises(MarkupParseError) as exc_info:
            resolver.resolve("<a>{{NAME}}</b>", {"NAME": "x"})

        assert exc_info.value.position == 11

    def test_typed_bindings(self, resolver):
        """Test that typed values are formatted by type."""
        bindings = {
            "OIO_DATE": TypedValue(value="2024-06-11", type=BindingType.DATE),
            "TOTAL": TypedValue(value="150000.5", type=BindingType.CURRENCY),
            "NAME": TypedValue(value="Asha", type=BindingType.TEXT),
        }

        text, _ = resolver.resolve("<a>{{NAME}} {{OIO_DATE}} {{TOTAL}}</a>", bindings)

        assert text == "<a>Asha 11/06/2024 1,50,000.50</a>"

    def test_western_grouping(self):
        """Test resolving with a western-grouping formatter."""
        resolver = PlaceholderResolver(formatter=ValueFormatter(grouping="western"))
        bindings = {"TOTAL": TypedValue(value=1234567, type=BindingType.CURRENCY)}

        text, _ = resolver.resolve("<a>{{TOTAL}}</a>", bindings)

        assert text == "<a>1,234,567.00</a>"

    def test_resolve_bytes(self, resolver):
        """Test resolving an encoded document part."""
        content, unresolved = resolver.resolve_bytes(
            "<a>{{NAME}} ₹</a>".encode("utf-8"), {"NAME": "Asha"}
        )

        assert content == "<a>Asha ₹</a>".encode("utf-8")
        assert unresolved == []

    def test_resolve_bytes_invalid_encoding(self, resolver):
        """Test that undecodable bytes raise a parse error."""
        with pytest.raises(MarkupParseError, match="not valid utf-8"):
            resolver.resolve_bytes(b"<a>\xff</a>", {})

    def test_resolved_tokens_mark_placeholders(self, resolver):
        """Test that substituted text is tagged with its placeholder name."""
        document = resolver.resolve_document("<a>Dear {{NAME}}!</a>", {"NAME": "Asha"})

        replaced = [t for t in document.tokens if t.placeholder]
        assert len(replaced) == 1
        assert replaced[0].placeholder == "NAME"
        assert replaced[0].text == "Asha"


class TestHtmlResolution:
    """Test resolution in the HTML dialect."""

    def test_resolve_html(self):
        """Test resolving across HTML inline elements."""
        resolver = PlaceholderResolver(dialect=HtmlDialect())
        raw = "<P>Dear <b>{{NA</b><B>ME}}</b>, 1 < 2<br></p>"

        text, unresolved = resolver.resolve(raw, {"NAME": "Asha"})

        assert text == "<P>Dear <b>Asha</b>, 1 < 2<br></p>"
        assert unresolved == []
