"""Data models for the document-type registry."""

import re
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..placeholders.models import BindingType
from ..placeholders.syntax import is_valid_placeholder_name

DEFAULT_GROUP_ORDER = 999
DEFAULT_GROUP_NAME = "Details"


class FieldGroup(BaseModel):
    """A titled section of a form."""

    name: str
    order: int = DEFAULT_GROUP_ORDER


class BaseField(BaseModel):
    """Attributes shared by every field kind."""

    binding_type: ClassVar[BindingType] = BindingType.TEXT

    label: str
    required: bool = False
    group: str = "general"
    full_width: bool = False


class TextField(BaseField):
    """Free text, optionally constrained by a regular expression."""

    type: Literal["text"] = "text"
    pattern: Optional[str] = None  # Must match the whole value
    placeholder: Optional[str] = None  # Hint shown in an empty input (e.g. "ABCDE1234F")

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"Invalid pattern {value!r}: {e}") from e
        return value


class NumberField(BaseField):
    """A plain number, passed through as entered."""

    type: Literal["number"] = "number"
    min: Optional[float] = None
    max: Optional[float] = None


class CurrencyField(BaseField):
    """A money amount, rendered with two decimals and digit grouping."""

    binding_type: ClassVar[BindingType] = BindingType.CURRENCY

    type: Literal["currency"] = "currency"
    min: Optional[float] = None
    max: Optional[float] = None
    sum_of: list[str] = Field(default_factory=list)  # Fields totalled into this one when blank


class DateField(BaseField):
    """A calendar date, rendered as DD/MM/YYYY."""

    binding_type: ClassVar[BindingType] = BindingType.DATE

    type: Literal["date"] = "date"


FieldSpec = Annotated[
    Union[TextField, NumberField, CurrencyField, DateField],
    Field(discriminator="type"),
]


class DocumentType(BaseModel):
    """A fillable document: its template and the fields that feed it."""

    name: str  # Display name (e.g., "FORM GST DRC-13")
    description: str = ""
    template: str  # Template file name, relative to the templates directory
    fields: dict[str, FieldSpec] = Field(default_factory=dict)
    field_groups: dict[str, FieldGroup] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_fields(self) -> "DocumentType":
        for key, spec in self.fields.items():
            if not is_valid_placeholder_name(key):
                raise ValueError(
                    f"Field key '{key}' is not a valid placeholder name "
                    "(uppercase letters, digits and underscores, starting with a letter)"
                )
            if isinstance(spec, CurrencyField):
                unknown = [name for name in spec.sum_of if name not in self.fields]
                if unknown:
                    raise ValueError(f"Field '{key}' sums unknown fields: {', '.join(unknown)}")
        return self

    def binding_types(self) -> dict[str, BindingType]:
        """Map each field key to the formatting rule its values need."""
        return {key: spec.binding_type for key, spec in self.fields.items()}

    def group_for(self, key: str) -> FieldGroup:
        """Return the group definition for a group key, with defaults for unknown groups."""
        return self.field_groups.get(key) or FieldGroup(name=DEFAULT_GROUP_NAME)

    def grouped_fields(self) -> list[tuple[str, FieldGroup, list[tuple[str, FieldSpec]]]]:
        """
        Group fields for display, ordered by group order.

        Groups with equal order keep the order in which their first field
        was declared.
        """
        grouped: dict[str, list[tuple[str, FieldSpec]]] = {}
        for key, spec in self.fields.items():
            grouped.setdefault(spec.group, []).append((key, spec))

        ordered = sorted(grouped, key=lambda group_key: self.group_for(group_key).order)
        return [(group_key, self.group_for(group_key), grouped[group_key]) for group_key in ordered]


class FieldError(BaseModel):
    """A validation failure on one form field."""

    field: str
    message: str


class FormValidationResult(BaseModel):
    """Result of validating form data against a document type."""

    valid: bool
    errors: list[FieldError] = Field(default_factory=list)


class DocumentTypeNotFoundError(Exception):
    """Exception raised when a document type key is not registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Document configuration not found for: {key}")


class FormValidationError(Exception):
    """Exception raised when form data fails validation."""

    def __init__(self, result: FormValidationResult):
        self.result = result
        details = "; ".join(f"{e.field}: {e.message}" for e in result.errors)
        super().__init__(f"Form validation failed - {details}")
