"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount) -> Decimal:
    """Parse a monetary amount into a Decimal.

    Handles:
    - Decimal and int values (returned exactly)
    - float values (converted through their shortest repr, never binary)
    - strings such as "123.45", "$1,234.56", "-$123.45" and "(123.45)"

    Args:
        amount: Amount value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(amount, bool) or amount is None:
        raise ValueError(f"Could not parse amount {amount!r}: not a number")

    if isinstance(amount, Decimal):
        result = amount
    elif isinstance(amount, int):
        result = Decimal(amount)
    elif isinstance(amount, float):
        result = Decimal(repr(amount))
    elif isinstance(amount, str):
        result = _parse_amount_string(amount)
    else:
        raise ValueError(f"Could not parse amount {amount!r}: not a number")

    if not result.is_finite():
        raise ValueError(f"Could not parse amount {amount!r}: not a finite number")
    return result


def _parse_amount_string(amount_str: str) -> Decimal:
    if not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}") from e
    return -amount if is_negative else amount
