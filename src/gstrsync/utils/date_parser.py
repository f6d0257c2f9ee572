"""Date parsing utilities for invoice and filing dates."""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser

# Spreadsheet serial day 0 (accounts for the 1900 leap-year bug)
EXCEL_EPOCH = date(1899, 12, 30)


def parse_date(value: Any) -> date:
    """Parse a raw date cell into a date object.

    Supports:
    - date / datetime objects
    - Spreadsheet serial numbers (e.g. 45306 -> 2024-01-15)
    - Day-first strings: "15/01/2024", "15-01-2024", "15-Jan-2024"
    - ISO strings: "2024-01-15", "2024-01-15T00:00:00Z"

    Args:
        value: Raw date value

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Could not parse date '{value}'")
    if isinstance(value, (int, float)):
        try:
            return EXCEL_EPOCH + timedelta(days=int(value))
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse date serial '{value}': {e}")

    if value is None or not str(value).strip():
        raise ValueError("Empty date string")

    date_str = str(value).strip()

    # ISO dates are year-first and must not be read day-first
    dayfirst = not (len(date_str) >= 5 and date_str[:4].isdigit() and date_str[4] in "-/")
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def format_display_date(value: Any) -> Optional[str]:
    """Render a raw date as dd/mm/yyyy.

    Blank input gives None; text that cannot be parsed is passed through
    trimmed so the reviewer still sees what the filing contained.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return parse_date(value).strftime("%d/%m/%Y")
    except ValueError:
        return str(value).strip() or None
