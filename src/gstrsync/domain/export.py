"""Render records with the column names downstream consumers expect."""

from decimal import Decimal
from typing import Any, Optional

from gstrsync.domain.entities import CUSTOM_SLAB, SLAB_LABELS, CanonicalRecord


def _amount(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else f"{value:.2f}"


def export_row(record: CanonicalRecord) -> dict[str, Any]:
    """Return a flat mapping of one record keyed by its display column names."""
    row: dict[str, Any] = {
        "Sl No": record.serial_no,
        "Date": record.invoice_date,
        "Vch No": record.voucher_number,
        "Vch Type": record.voucher_type,
        "Reference No.": record.reference_number,
        "Reference Date": record.reference_date,
        "Supplier Name": record.supplier_name,
        "GSTIN/UIN": record.gstin,
        "GST Registration Type": record.gst_registration_type,
        "State": record.place_of_supply,
        "Supplier State": record.supplier_state,
        "Supplier Amount": _amount(record.supplier_amount),
        "Supplier DR/CR": record.supplier_dr_cr,
        "Reverse Supply Charge": record.reverse_charge,
        "ITC Availability": record.itc_availability,
        "Ledger Name": record.ledger_name,
    }
    for slab in SLAB_LABELS:
        ledger = record.ledger(slab)
        row[f"Ledger Amount {slab}"] = _amount(ledger.ledger_amount)
        row[f"Ledger DR/CR {slab}"] = ledger.dr_cr
        row[f"IGST Rate {slab}"] = _amount(ledger.igst)
        row[f"CGST Rate {slab}"] = _amount(ledger.cgst)
        row[f"SGST/UTGST Rate {slab}"] = _amount(ledger.sgst)

    custom = record.ledger(CUSTOM_SLAB)
    row.update(
        {
            "Custom Ledger Amount": _amount(custom.ledger_amount),
            "Custom Ledger DR/CR": custom.dr_cr,
            "Custom IGST Rate": _amount(custom.igst),
            "Custom CGST Rate": _amount(custom.cgst),
            "Custom SGST/UTGST": _amount(custom.sgst),
            "Cess": _amount(record.cess),
            "groAmount": _amount(record.gro_amount),
            "roundOffDr": _amount(record.round_off_dr),
            "roundOffCr": _amount(record.round_off_cr),
            "invoiceAmount": _amount(record.invoice_amount),
            "Change Mode": record.change_mode,
            "Filing Date": record.filing_date,
            "Invoice Value": _amount(record.invoice_value),
            "Taxable Value": _amount(record.taxable_value),
            "Accept Credit": record.accept_credit,
            "Action": record.action,
            "Action Reason": record.action_reason,
            "Narration": record.narration,
        }
    )
    return row
