"""Date parsing utilities."""

from datetime import date, datetime
from dateutil import parser as date_parser


def parse_date(value) -> date:
    """Parse a period boundary into a date object.

    Accepts date and datetime objects as well as strings in any format
    dateutil understands ("2024-01-31", "2024-01-31T00:00:00Z",
    "January 31, 2024").

    Args:
        value: Date value

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Could not parse date {value!r}")

    try:
        return date_parser.isoparse(value.strip()).date()
    except ValueError:
        pass

    try:
        return date_parser.parse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}") from e
