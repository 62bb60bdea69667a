"""Pytest configuration and shared fixtures."""

import io
import zipfile
from pathlib import Path
from typing import Callable, Optional

import pytest

from formsmith.config import Settings
from formsmith.placeholders import PlaceholderResolver
from formsmith.registry import DocumentRegistry, default_registry

W_NS = 'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"'

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "</Types>"
)


def wordml_document(body: str) -> str:
    """Wrap paragraphs in a minimal word/document.xml."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f"<w:document {W_NS}><w:body>{body}</w:body></w:document>"
    )


def build_docx(document_xml: str, parts: Optional[dict[str, str]] = None) -> bytes:
    """Build a DOCX archive in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        archive.writestr("word/document.xml", document_xml)
        for name, content in (parts or {}).items():
            archive.writestr(name, content)
    return buffer.getvalue()


def read_part(docx: bytes, name: str) -> str:
    """Read one part of a DOCX archive as text."""
    with zipfile.ZipFile(io.BytesIO(docx)) as archive:
        return archive.read(name).decode("utf-8")


# DRC-13 body with the run splits Word produces around spell-check marks and formatting
DRC13_BODY = (
    "<w:p><w:r><w:t>To,</w:t></w:r></w:p>"
    '<w:p><w:r><w:t>{{BANK_</w:t></w:r><w:proofErr w:type="spellStart"/>'
    "<w:r><w:rPr><w:b/></w:rPr><w:t>NAME}}</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>{{BANK_ADDRESS_LINE1}}</w:t></w:r>"
    "<w:r><w:t>{{BANK_ADDRESS_LINE2}}</w:t></w:r></w:p>"
    '<w:p><w:r><w:t xml:space="preserve">GSTIN: {{</w:t></w:r>'
    "<w:r><w:t>GSTIN}}</w:t></w:r></w:p>"
    '<w:p><w:r><w:t xml:space="preserve">Trade name: {{TRADE_NAME}}</w:t></w:r></w:p>'
    '<w:p><w:r><w:t xml:space="preserve">Order No. {{OIO_NO}} dated {{OIO_</w:t></w:r>'
    "<w:r><w:t>DATE}}</w:t></w:r></w:p>"
    '<w:p><w:r><w:t xml:space="preserve">Tax: {{TAX}} Penalty: {{PENALTY}} '
    "Interest: {{INTEREST}} Total: {{TOTAL}}</w:t></w:r></w:p>"
    '<w:p><w:r><w:t xml:space="preserve">Seal: {{SEAL_NO}}</w:t></w:r></w:p>'
)

DRC13_HEADER = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f"<w:hdr {W_NS}><w:p><w:r><w:t>{{{{LEGAL_NAME}}}}</w:t></w:r></w:p></w:hdr>"
)


@pytest.fixture
def make_docx() -> Callable[..., bytes]:
    """Factory for in-memory DOCX archives."""
    return build_docx


@pytest.fixture
def drc13_docx() -> bytes:
    """A DRC-13 template with fragmented placeholders and a header part."""
    return build_docx(
        wordml_document(DRC13_BODY),
        parts={
            "word/header1.xml": DRC13_HEADER,
            "word/media/seal.png": "not really a png",
        },
    )


@pytest.fixture
def templates_dir(tmp_path: Path, drc13_docx: bytes) -> Path:
    """Templates directory holding the DRC-13 template only."""
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "DRC-13-Template.docx").write_bytes(drc13_docx)
    return directory


@pytest.fixture
def test_settings(templates_dir: Path) -> Settings:
    """Create settings with test values."""
    return Settings(
        templates_dir=templates_dir,
        registry_path=None,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        cors_allow_origins=["*"],
        currency_grouping="indian",
        strict_placeholders=False,
        max_template_bytes=1024 * 1024,
    )


@pytest.fixture
def registry() -> DocumentRegistry:
    """The built-in document types."""
    return default_registry()


@pytest.fixture
def resolver() -> PlaceholderResolver:
    """A resolver for XML markup with Indian digit grouping."""
    return PlaceholderResolver()


@pytest.fixture
def drc13_form() -> dict[str, str]:
    """A complete, valid DRC-13 submission with the total left for computing."""
    return {
        "BANK_NAME": "State Bank of India",
        "BANK_ADDRESS_LINE1": "Parliament Street",
        "BANK_ADDRESS_LINE2": "",
        "GSTIN": "07AABCU9603R1ZM",
        "TRADE_NAME": "A & B Traders",
        "LEGAL_NAME": "A and B Private Limited",
        "TAXPAYER_ADDRESS_LINE1": "12 Main Road",
        "ACCOUNT_NO": "00112233445",
        "PAN_NO": "AABCU9603R",
        "OIO_NO": "OIO/2024/17",
        "OIO_DATE": "2024-06-11",
        "TAX": "100000",
        "PENALTY": "25000",
        "INTEREST": "25000.50",
        "TOTAL": "",
    }


@pytest.fixture
def docx_part() -> Callable[[bytes, str], str]:
    """Reader for one part of a DOCX archive."""
    return read_part
