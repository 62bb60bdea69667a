"""Document-type registry.

Declares which documents can be generated, the fields each one needs, and
how submitted values are validated.
"""

from .models import (
    CurrencyField,
    DateField,
    DocumentType,
    DocumentTypeNotFoundError,
    FieldError,
    FieldGroup,
    FieldSpec,
    FormValidationError,
    FormValidationResult,
    NumberField,
    TextField,
)
from .registry import DocumentRegistry, default_registry, load_registry
from .validator import FormValidator

__all__ = [
    "CurrencyField",
    "DateField",
    "DocumentType",
    "DocumentTypeNotFoundError",
    "FieldError",
    "FieldGroup",
    "FieldSpec",
    "FormValidationError",
    "FormValidationResult",
    "NumberField",
    "TextField",
    "DocumentRegistry",
    "default_registry",
    "load_registry",
    "FormValidator",
]
