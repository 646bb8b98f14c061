"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY = re.compile(r"[$€£¥]|(?:kr|SEK)\.?", re.IGNORECASE)
_MINUS_SIGNS = str.maketrans({"\u2212": "-", "\u2013": "-"})
_WHITESPACE = re.compile(r"\s")


def parse_amount(amount_str: str, decimal_separator: str = ".") -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    With ``decimal_separator=","`` the comma is the decimal mark and dots or
    spaces group thousands:
    - "-65,00"
    - "1 234,50"
    - "1.234,50 kr"

    A comma-locale string without any comma is read as a plain dot-decimal
    number ("12.50" stays 12.50).

    Args:
        amount_str: Amount string
        decimal_separator: "." or ","

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if decimal_separator not in (".", ","):
        raise ValueError(f"Unsupported decimal separator '{decimal_separator}'")

    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip().translate(_MINUS_SIGNS)

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = _CURRENCY.sub("", amount_str)
    amount_str = _WHITESPACE.sub("", amount_str)

    if decimal_separator == "," and "," in amount_str:
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    if is_negative:
        amount = -amount
    return amount
