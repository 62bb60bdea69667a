"""Document assembly: opening templates, filling them and naming the result."""

from .container import (
    DOCX_MEDIA_TYPE,
    DocxPackage,
    FilledDocument,
    TemplateLoadError,
    is_text_part,
)
from .generator import (
    DocumentGenerator,
    GeneratedDocument,
    UnresolvedPlaceholdersError,
    output_filename,
)

__all__ = [
    "DOCX_MEDIA_TYPE",
    "DocxPackage",
    "FilledDocument",
    "TemplateLoadError",
    "is_text_part",
    "DocumentGenerator",
    "GeneratedDocument",
    "UnresolvedPlaceholdersError",
    "output_filename",
]
