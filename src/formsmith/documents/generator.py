"""Document generation: form data in, filled DOCX out."""

import logging
import re
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from ..config import Settings
from ..placeholders import (
    MarkupParseError,
    PlaceholderResolver,
    TemplateCheck,
    TypedValue,
    ValueFormatter,
)
from ..registry import (
    CurrencyField,
    DocumentRegistry,
    DocumentType,
    FormValidationError,
    FormValidationResult,
    FormValidator,
)
from ..registry.validator import parse_number
from .container import DOCX_MEDIA_TYPE, DocxPackage

logger = logging.getLogger(__name__)


class GeneratedDocument(BaseModel):
    """A filled document ready for download."""

    filename: str
    content: bytes
    media_type: str = DOCX_MEDIA_TYPE
    unresolved: list[str] = Field(default_factory=list)


class UnresolvedPlaceholdersError(Exception):
    """Exception raised in strict mode when a document has unresolved placeholders."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Unresolved placeholders in template: {', '.join(names)}")


def output_filename(document_type: DocumentType, now: Optional[datetime] = None) -> str:
    """Build the download name: display name with underscores plus a minute timestamp."""
    now = now or datetime.now()
    stem = re.sub(r"\s+", "_", document_type.name)
    return f"{stem}_{now.strftime('%Y%m%d%H%M')}.docx"


class DocumentGenerator:
    """Fills registered document templates from submitted form data."""

    def __init__(
        self,
        registry: DocumentRegistry,
        settings: Settings,
        resolver: Optional[PlaceholderResolver] = None,
        validator: Optional[FormValidator] = None,
    ):
        """
        Initialize the generator.

        Args:
            registry: Document types available for generation
            settings: Application settings (templates directory, limits)
            resolver: PlaceholderResolver (created from settings if not provided)
            validator: FormValidator (created if not provided)
        """
        self.registry = registry
        self.settings = settings
        self.resolver = resolver or PlaceholderResolver(
            formatter=ValueFormatter(grouping=settings.currency_grouping)
        )
        self.validator = validator or FormValidator()

    def template_path(self, key: str) -> Path:
        """Return where the template for a document type lives."""
        document_type = self.registry.get(key)
        return self.settings.templates_dir / document_type.template

    def template_available(self, key: str) -> bool:
        """Check that a document type's template exists and can be read."""
        try:
            return self.template_path(key).is_file()
        except OSError:
            return False

    def prepare_form_data(self, document_type: DocumentType, form_data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Normalize submitted values and fill computed totals.

        Strings are stripped. A blank currency field with `sum_of` set gets
        the total of its parts; parts that are blank or not numbers count as
        zero.
        """
        prepared = {
            key: value.strip() if isinstance(value, str) else value
            for key, value in form_data.items()
        }

        for key, spec in document_type.fields.items():
            if not isinstance(spec, CurrencyField) or not spec.sum_of:
                continue
            current = prepared.get(key)
            if current is not None and current != "":
                continue
            total = sum(
                (parse_number(prepared.get(part)) or Decimal(0) for part in spec.sum_of),
                Decimal(0),
            )
            prepared[key] = f"{total:.2f}"
            logger.debug(f"Computed {key} = {prepared[key]} from {', '.join(spec.sum_of)}")

        return prepared

    def validate(self, key: str, form_data: Mapping[str, Any]) -> FormValidationResult:
        """Validate form data for a document type after computing totals."""
        document_type = self.registry.get(key)
        prepared = self.prepare_form_data(document_type, form_data)
        return self.validator.validate(document_type, prepared)

    def build_bindings(
        self, document_type: DocumentType, form_data: Mapping[str, Any]
    ) -> dict[str, TypedValue]:
        """Attach each field's declared binding type to its submitted value."""
        types = document_type.binding_types()
        return {
            key: TypedValue(value=form_data.get(key), type=binding_type)
            for key, binding_type in types.items()
        }

    def generate(self, key: str, form_data: Mapping[str, Any]) -> GeneratedDocument:
        """
        Generate a filled document.

        Args:
            key: Document type key (e.g., "DRC-13")
            form_data: Submitted field values keyed by field key

        Returns:
            GeneratedDocument with the filled archive and unresolved names

        Raises:
            DocumentTypeNotFoundError: If the key is not registered
            FormValidationError: If the form data is invalid
            FileNotFoundError: If the template file is missing
            TemplateLoadError: If the template is not a DOCX archive
            MarkupParseError: If a template part is malformed
            UnresolvedPlaceholdersError: In strict mode, if placeholders remain
        """
        document_type = self.registry.get(key)
        prepared = self.prepare_form_data(document_type, form_data)

        validation = self.validator.validate(document_type, prepared)
        if not validation.valid:
            raise FormValidationError(validation)

        template_path = self.settings.templates_dir / document_type.template
        logger.info(f"Generating '{key}' from {template_path}")

        package = DocxPackage.from_path(template_path, max_bytes=self.settings.max_template_bytes)
        bindings = self.build_bindings(document_type, prepared)
        filled = package.fill(self.resolver, bindings)

        if filled.unresolved:
            logger.warning(
                f"Template for '{key}' has placeholders with no field: {', '.join(filled.unresolved)}"
            )
            if self.settings.strict_placeholders:
                raise UnresolvedPlaceholdersError(filled.unresolved)

        document = GeneratedDocument(
            filename=output_filename(document_type),
            content=filled.content,
            unresolved=filled.unresolved,
        )
        logger.info(f"Generated {document.filename} ({len(document.content)} bytes)")
        return document

    def inspect_template(self, key: str) -> TemplateCheck:
        """
        Compare a template's placeholders with its document type's fields.

        Raises:
            DocumentTypeNotFoundError: If the key is not registered
            FileNotFoundError: If the template file is missing
            TemplateLoadError: If the template is not a DOCX archive
            MarkupParseError: If a template part is malformed
        """
        document_type = self.registry.get(key)
        package = DocxPackage.from_path(
            self.template_path(key), max_bytes=self.settings.max_template_bytes
        )

        names: list[str] = []
        fragmented: list[str] = []
        for part in package.text_parts:
            data = package.read_part(part)
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MarkupParseError(f"{part}: document is not valid utf-8", e.start) from e

            check = self.resolver.parser.validate_template(text)
            names.extend(name for name in check.placeholders if name not in names)
            fragmented.extend(name for name in check.fragmented if name not in fragmented)

        expected = list(document_type.fields)
        return TemplateCheck(
            placeholders=names,
            fragmented=fragmented,
            missing=[name for name in expected if name not in names],
            unknown=[name for name in names if name not in expected],
        )
