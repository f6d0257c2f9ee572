"""Utility functions for gstrsync."""

from gstrsync.utils.date_parser import parse_date, format_display_date
from gstrsync.utils.amount_parser import parse_amount, to_amount, round_money
from gstrsync.utils.text import clean_string, normalize_key

__all__ = [
    "parse_date",
    "format_display_date",
    "parse_amount",
    "to_amount",
    "round_money",
    "clean_string",
    "normalize_key",
]
