"""Text formatting helpers for CLI output."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")
TENTH = Decimal("0.1")


def format_currency(value: Decimal) -> str:
    """Format an amount as dollars, e.g. '-$1,234.50'."""
    rounded = Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_percent(value: Optional[Decimal]) -> str:
    """Format a percentage with one decimal, 'N/A' for None."""
    if value is None:
        return "N/A"
    return f"{Decimal(value).quantize(TENTH, rounding=ROUND_HALF_UP)}%"
