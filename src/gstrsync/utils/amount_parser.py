"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional
import re

TWO_PLACES = Decimal("0.01")

# Amounts at or beyond this magnitude are rejected as malformed cells
MAX_AMOUNT = Decimal("1e15")


def _in_range(amount: Decimal, raw: Any) -> Decimal:
    if not amount.is_finite():
        raise ValueError(f"Non-finite amount '{raw}'")
    if abs(amount) >= MAX_AMOUNT:
        raise ValueError(f"Amount '{raw}' is out of range")
    return amount


def parse_amount(value: Any) -> Decimal:
    """Parse a raw cell value into a Decimal.

    Handles various formats:
    - 123.45 (int/float/Decimal)
    - "123.45"
    - "₹1,234.56"
    - "18%"
    - "(123.45)" (negative in parentheses)

    Args:
        value: Raw cell value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount '{value}'")
    if isinstance(value, Decimal):
        return _in_range(value, value)
    if isinstance(value, int):
        return _in_range(Decimal(value), value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"Non-finite amount '{value}'")
        # repr keeps the shortest round-trip form (0.1 -> "0.1")
        return _in_range(Decimal(repr(value)), value)

    if value is None or not str(value).strip():
        raise ValueError("Empty amount string")

    amount_str = str(value).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols, percent signs and thousands separators
    amount_str = re.sub(r"[₹$%,]", "", amount_str)
    amount_str = amount_str.replace("Rs.", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    amount = _in_range(amount, amount_str)
    return -amount if is_negative else amount


def to_amount(value: Any) -> Optional[Decimal]:
    """Parse a raw cell value, returning None for blank or malformed input."""
    try:
        return parse_amount(value)
    except ValueError:
        return None


def amount_or_zero(value: Any) -> Decimal:
    """Parse a raw cell value, treating blank or malformed input as zero."""
    amount = to_amount(value)
    return amount if amount is not None else Decimal("0")


def round_money(amount: Decimal) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
