"""Derivation of the reverse-charge, mismatched and disallow views."""

from dataclasses import replace
from typing import Any, Iterable, Optional

from gstrsync.domain.entities import CanonicalRecord
from gstrsync.utils.text import clean_string, normalize_yes_no

# Ledger names containing this token (any case) are routed to the disallow view
DISALLOW_MARKER = "[disallow]"


def renumber(rows: Iterable[CanonicalRecord]) -> tuple[CanonicalRecord, ...]:
    """Return the rows with ``serial_no`` reset to 1..n in their current order."""
    return tuple(
        row if row.serial_no == position else replace(row, serial_no=position)
        for position, row in enumerate(rows, start=1)
    )


def is_disallow_ledger(ledger_name: Optional[str]) -> bool:
    name = clean_string(ledger_name)
    return name is not None and DISALLOW_MARKER in name.lower()


def is_disallowed(record: CanonicalRecord) -> bool:
    """True when the ledger name carries the disallow marker or ITC is "No"."""
    return (
        is_disallow_ledger(record.ledger_name)
        or normalize_yes_no(record.itc_availability) == "No"
    )


def derive_disallow(canonical: Iterable[CanonicalRecord]) -> tuple[CanonicalRecord, ...]:
    """Build the disallow view from the canonical set's current values."""
    return renumber(row for row in canonical if is_disallowed(row))


def project_fixed_view(
    canonical: Iterable[CanonicalRecord], view_rows: Iterable[CanonicalRecord]
) -> tuple[CanonicalRecord, ...]:
    """Refresh a fixed-membership view from the canonical set.

    Membership and order come from ``view_rows``; each member is replaced by
    its canonical counterpart (joined on ``source_row_id``) so edits made
    anywhere are carried into the view. Members with no counterpart are kept
    as they are.
    """
    by_source = {row.source_row_id: row for row in canonical}
    return renumber(by_source.get(row.source_row_id, row) for row in view_rows)


def row_signature(record: CanonicalRecord) -> tuple[Any, ...]:
    """Identity used to de-duplicate disallow rows across re-processing."""
    amount = record.supplier_amount if record.supplier_amount is not None else record.invoice_amount
    return (
        record.reference_number or "",
        record.supplier_name or "",
        record.gstin or "",
        record.invoice_number or "",
        str(amount) if amount is not None else "",
    )


def merge_disallow(
    existing: Iterable[CanonicalRecord], candidates: Iterable[CanonicalRecord]
) -> tuple[CanonicalRecord, ...]:
    """Union existing disallow rows with new candidates, first signature wins."""
    seen: set[tuple[Any, ...]] = set()
    merged = []
    for row in (*existing, *candidates):
        signature = row_signature(row)
        if signature in seen:
            continue
        seen.add(signature)
        merged.append(row)
    return renumber(merged)
