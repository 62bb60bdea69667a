"""Formatting rules for bound values, selected by declared type."""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from .models import BindingType, BindingValue, TypedValue

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"
CURRENCY_QUANTUM = Decimal("0.01")

GROUPING_INDIAN = "indian"
GROUPING_WESTERN = "western"
GROUPING_STYLES = (GROUPING_INDIAN, GROUPING_WESTERN)


def group_digits(digits: str, style: str = GROUPING_INDIAN) -> str:
    """
    Insert thousands separators into a run of integer digits.

    Western grouping separates every three digits; Indian grouping separates
    the last three and then every two (12,34,567).
    """
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    step = 2 if style == GROUPING_INDIAN else 3
    groups = []
    while head:
        groups.insert(0, head[-step:])
        head = head[:-step]
    return ",".join(groups + [tail])


class ValueFormatter:
    """Render typed binding values as the text that goes into a document."""

    def __init__(self, grouping: str = GROUPING_INDIAN):
        if grouping not in GROUPING_STYLES:
            raise ValueError(
                f"Unknown currency grouping: {grouping} (expected one of {', '.join(GROUPING_STYLES)})"
            )
        self.grouping = grouping

    def render(self, binding: BindingValue) -> str:
        """Return the display text of a binding, formatting typed values."""
        if isinstance(binding, TypedValue):
            return self.format(binding.value, binding.type)
        if binding is None:
            return ""
        return str(binding)

    def format(self, value: Any, binding_type: BindingType) -> str:
        """Format a raw value according to its declared type."""
        if binding_type == BindingType.DATE:
            return self.format_date(value)
        if binding_type == BindingType.CURRENCY:
            return self.format_currency(value)
        return "" if value is None else str(value)

    def format_date(self, value: Any) -> str:
        """Render a date as DD/MM/YYYY; unparseable text passes through."""
        if value is None or value == "":
            return ""
        if isinstance(value, (date, datetime)):
            return value.strftime(DATE_FORMAT)

        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Could not parse date value: {text!r}")
            return text
        return parsed.strftime(DATE_FORMAT)

    def format_currency(self, value: Any) -> str:
        """Render an amount with two decimals and digit grouping."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return "0.00"

        try:
            amount = Decimal(str(value).strip().replace(",", ""))
        except InvalidOperation:
            logger.warning(f"Could not parse currency value: {value!r}")
            return str(value)
        if not amount.is_finite():
            logger.warning(f"Could not parse currency value: {value!r}")
            return str(value)

        try:
            with localcontext() as ctx:
                # Enough digits for every integer place plus two decimals
                ctx.prec = max(ctx.prec, amount.adjusted() + 3)
                amount = amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            logger.warning(f"Could not format currency value: {value!r}")
            return str(value)
        sign = "-" if amount < 0 else ""
        whole, fraction = f"{amount.copy_abs():.2f}".split(".")
        return f"{sign}{group_digits(whole, self.grouping)}.{fraction}"
