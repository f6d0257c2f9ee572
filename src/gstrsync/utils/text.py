"""Text normalisation helpers shared by the classifier and the services."""

from typing import Any, Optional


def clean_string(value: Any) -> Optional[str]:
    """Trim a raw value to a string, mapping blank to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_key(value: Any) -> str:
    """Normalise an identifier (invoice number, GSTIN) for comparison."""
    if value is None:
        return ""
    return str(value).strip().upper()


def normalize_yes_no(value: Any) -> Optional[str]:
    """Map yes/y/no/n (any case) to "Yes"/"No"; anything else to None."""
    text = clean_string(value)
    if text is None:
        return None
    lower = text.lower()
    if lower in ("yes", "y"):
        return "Yes"
    if lower in ("no", "n"):
        return "No"
    return None
