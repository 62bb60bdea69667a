"""DOCX archive handling for template filling."""

import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Mapping, Optional, Pattern, Union

from pydantic import BaseModel, Field

from ..placeholders import BindingValue, MarkupParseError, PlaceholderResolver

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# WordprocessingML parts that can hold user-visible text
TEXT_PART_PATTERN: Pattern = re.compile(
    r"^word/(document|header\d*|footer\d*|footnotes|endnotes|comments)\.xml$"
)


class TemplateLoadError(Exception):
    """Exception raised when a template cannot be opened as a DOCX archive."""

    pass


class FilledDocument(BaseModel):
    """Result of filling a DOCX template."""

    content: bytes
    unresolved: list[str] = Field(default_factory=list)
    parts: list[str] = Field(default_factory=list)  # Text-bearing parts that were resolved


def is_text_part(name: str) -> bool:
    """Return whether an archive entry can contain placeholders."""
    return bool(TEXT_PART_PATTERN.match(name))


class DocxPackage:
    """An opened DOCX archive whose text parts can be resolved."""

    def __init__(self, entries: list[tuple[zipfile.ZipInfo, bytes]]):
        self.entries = entries

    @classmethod
    def from_bytes(cls, data: bytes, max_bytes: Optional[int] = None) -> "DocxPackage":
        """
        Open a DOCX archive from its raw bytes.

        Raises:
            TemplateLoadError: If the data is too large or not a DOCX archive
        """
        if max_bytes is not None and len(data) > max_bytes:
            raise TemplateLoadError(
                f"Template is {len(data)} bytes, larger than the {max_bytes} byte limit"
            )

        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                entries = [(info, archive.read(info.filename)) for info in archive.infolist()]
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise TemplateLoadError(f"Invalid .docx archive: {e}") from e

        if not any(info.filename == "word/document.xml" for info, _ in entries):
            raise TemplateLoadError("Invalid .docx archive: missing word/document.xml")

        return cls(entries)

    @classmethod
    def from_path(cls, path: Union[str, Path], max_bytes: Optional[int] = None) -> "DocxPackage":
        """Open a DOCX archive from disk."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Template file not found: {path}")
        return cls.from_bytes(path.read_bytes(), max_bytes=max_bytes)

    @property
    def text_parts(self) -> list[str]:
        return [info.filename for info, _ in self.entries if is_text_part(info.filename)]

    def read_part(self, name: str) -> bytes:
        """Return the raw bytes of one archive entry."""
        for info, data in self.entries:
            if info.filename == name:
                return data
        raise KeyError(name)

    def fill(
        self, resolver: PlaceholderResolver, bindings: Mapping[str, BindingValue]
    ) -> FilledDocument:
        """
        Resolve placeholders in every text-bearing part and repackage.

        All parts are resolved before anything is written, so a malformed
        part aborts the whole fill. Every other entry is copied unchanged
        and in its original order.

        Raises:
            MarkupParseError: If any text part is malformed
        """
        replaced: dict[str, bytes] = {}
        unresolved: list[str] = []

        for info, data in self.entries:
            if not is_text_part(info.filename):
                continue
            try:
                content, missing = resolver.resolve_bytes(data, bindings)
            except MarkupParseError as e:
                raise MarkupParseError(f"{info.filename}: {e.message}", e.position) from e
            replaced[info.filename] = content
            for name in missing:
                if name not in unresolved:
                    unresolved.append(name)

        output = io.BytesIO()
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as archive:
            for info, data in self.entries:
                archive.writestr(info, replaced.get(info.filename, data))

        logger.debug(f"Filled {len(replaced)} parts, {len(unresolved)} unresolved placeholders")
        return FilledDocument(content=output.getvalue(), unresolved=unresolved, parts=list(replaced))
