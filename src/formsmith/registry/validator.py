"""Form validation against document-type schemas."""

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from .models import (
    CurrencyField,
    DateField,
    DocumentType,
    FieldError,
    FieldSpec,
    FormValidationResult,
    NumberField,
    TextField,
)

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_number(value: Any) -> Optional[Decimal]:
    """Parse a form number, tolerating grouping commas; None if not a number."""
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


class FormValidator:
    """Validates submitted form data against a document type."""

    def validate(self, document_type: DocumentType, form_data: Mapping[str, Any]) -> FormValidationResult:
        """
        Validate every field of a form.

        Checks:
        1. Required fields are present and not blank
        2. Text fields match their pattern (whole value)
        3. Number and currency fields parse and respect min/max
        4. Date fields are ISO dates (YYYY-MM-DD)

        All failures are collected rather than stopping at the first one.
        """
        errors: list[FieldError] = []

        for key, spec in document_type.fields.items():
            value = form_data.get(key)

            if _is_blank(value):
                if spec.required:
                    errors.append(
                        FieldError(field=key, message=f"Please fill in the required field: {spec.label}")
                    )
                continue

            message = self._check_value(spec, value)
            if message:
                errors.append(FieldError(field=key, message=message))

        if errors:
            logger.debug(f"Form for '{document_type.name}' failed with {len(errors)} errors")

        return FormValidationResult(valid=not errors, errors=errors)

    def _check_value(self, spec: FieldSpec, value: Any) -> Optional[str]:
        """Return an error message for a non-blank value, or None if it is valid."""
        if isinstance(spec, TextField):
            if spec.pattern and not re.fullmatch(spec.pattern, str(value).strip()):
                return f"Please enter a valid {spec.label}"
            return None

        if isinstance(spec, (NumberField, CurrencyField)):
            number = parse_number(value)
            if number is None:
                return f"{spec.label} must be a number"
            if spec.min is not None and number < Decimal(str(spec.min)):
                return f"{spec.label} must be at least {spec.min:g}"
            if spec.max is not None and number > Decimal(str(spec.max)):
                return f"{spec.label} must be at most {spec.max:g}"
            return None

        if isinstance(spec, DateField):
            if isinstance(value, date):
                return None
            try:
                date.fromisoformat(str(value).strip())
            except ValueError:
                return f"{spec.label} must be a date in YYYY-MM-DD form"
            return None

        return None
