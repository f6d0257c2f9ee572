"""Row classification: raw filing row to canonical ledger-ready record."""

import math
from decimal import Decimal
from typing import Any, Optional

from gstrsync.domain.entities import (
    CUSTOM_SLAB,
    CanonicalRecord,
    ClassifiedRow,
    SlabLedger,
    TaxMode,
    empty_ledgers,
)
from gstrsync.domain.lookups import PartyLookup, StateLookup
from gstrsync.domain.profiles import SourceProfile
from gstrsync.domain.slabs import resolve_slab
from gstrsync.utils.amount_parser import amount_or_zero, round_money, to_amount
from gstrsync.utils.date_parser import format_display_date
from gstrsync.utils.text import clean_string

ZERO = Decimal("0")

REVERSE_CHARGE_TRUE = {"yes", "y", "1", "true"}
REVERSE_CHARGE_FALSE = {"no", "n", "0", "false"}

REGISTRATION_TYPES = {"R": "Regular"}


def interpret_reverse_charge(value: Any) -> tuple[bool, Optional[str]]:
    """Interpret a raw reverse-charge cell.

    Returns:
        (is_reverse_charge, display label). Unknown text is passed through as
        the label and counts as not reverse charge.
    """
    if value is None:
        return False, None
    if isinstance(value, bool):
        return value, "Yes" if value else "No"
    text = str(value).strip()
    if not text:
        return False, None
    lower = text.lower()
    if lower in REVERSE_CHARGE_TRUE:
        return True, "Yes"
    if lower in REVERSE_CHARGE_FALSE:
        return False, "No"
    return False, text


def normalize_itc_availability(value: Any) -> str:
    """Normalise the ITC availability column, defaulting to "Yes"."""
    text = clean_string(value)
    if text is None:
        return "Yes"
    lower = text.lower()
    if lower in ("yes", "y"):
        return "Yes"
    if lower in ("no", "n"):
        return "No"
    return text


def compute_round_off(gross: Decimal) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """Split the fractional part of a gross amount into a round-off entry.

    Fractions of .50 and above are credited up to the next unit, smaller
    fractions are debited down; integral amounts need no entry.

    Returns:
        (round_off_dr, round_off_cr)
    """
    fraction = gross - math.floor(gross)
    if fraction <= 0:
        return None, None
    if fraction >= Decimal("0.5"):
        return None, round_money(math.ceil(gross) - gross)
    return round_money(fraction), None


class RowClassifier:
    """Classify raw rows of one source type into canonical records."""

    def __init__(
        self,
        profile: SourceProfile,
        state_lookup: StateLookup,
        party_lookup: Optional[PartyLookup] = None,
    ):
        """Initialize the classifier.

        Args:
            profile: Source profile of the rows being classified
            state_lookup: GSTIN prefix to state name table
            party_lookup: GSTIN to party name table for the owning company
        """
        self.profile = profile
        self.state_lookup = state_lookup
        self.party_lookup = party_lookup or PartyLookup()

    def _place_of_supply(self, row: dict[str, Any]) -> Optional[str]:
        for key in self.profile.place_of_supply_fields:
            value = clean_string(row.get(key))
            if value:
                return value
        return None

    def _supplier_name(self, row: dict[str, Any], gstin: str) -> tuple[Optional[str], bool]:
        party_name = self.party_lookup.lookup(gstin)
        if party_name is not None:
            return party_name, True
        return clean_string(row.get(self.profile.supplier_name_field)), False

    def classify(self, row: dict[str, Any], source_row_id: int) -> ClassifiedRow:
        """Classify one raw row.

        Args:
            row: Raw field mapping produced by the import adapter
            source_row_id: Stable identity to stamp on the record

        Returns:
            ClassifiedRow with the record and whether it missed every slab
        """
        is_reverse_charge, reverse_charge_label = interpret_reverse_charge(
            row.get("reverseCharge")
        )

        gstin = clean_string(row.get("gstin")) or ""
        supplier_name, auto_filled = self._supplier_name(row, gstin)

        taxable_value = amount_or_zero(row.get("taxableValue"))
        invoice_value = amount_or_zero(row.get("invoiceValue"))
        igst = amount_or_zero(row.get("igst"))
        cgst = amount_or_zero(row.get("cgst"))
        sgst = amount_or_zero(row.get("sgst"))
        cess = amount_or_zero(row.get("cess"))

        rate_percent = None
        if self.profile.rate_field:
            rate_percent = to_amount(row.get(self.profile.rate_field))

        invoice_type = clean_string(row.get("invoiceType"))
        filing_date = None
        if self.profile.filing_date_field:
            filing_date = format_display_date(row.get(self.profile.filing_date_field))

        ledgers = empty_ledgers()
        slab = resolve_slab(taxable_value, igst, cgst, rate_percent)
        ledger_amount = taxable_value
        igst_applied, cgst_applied, sgst_applied = igst, cgst, sgst

        if slab is not None:
            if slab.mode is TaxMode.IGST:
                cgst_applied = sgst_applied = ZERO
                ledgers[slab.slab] = SlabLedger(
                    ledger_amount=ledger_amount, dr_cr="DR", igst=igst_applied
                )
            else:
                igst_applied = ZERO
                ledgers[slab.slab] = SlabLedger(
                    ledger_amount=ledger_amount,
                    dr_cr="DR",
                    cgst=cgst_applied,
                    sgst=sgst_applied,
                )
        else:
            ledger_amount = taxable_value or invoice_value
            ledgers[CUSTOM_SLAB] = SlabLedger(
                ledger_amount=ledger_amount,
                dr_cr="DR" if ledger_amount else None,
                igst=igst_applied or None,
                cgst=cgst_applied or None,
                sgst=sgst_applied or None,
            )

        gross = ledger_amount + igst_applied + cgst_applied + sgst_applied
        if not is_reverse_charge or self.profile.cess_in_reverse_charge_gross:
            gross += cess
        gro_amount = round_money(gross)

        round_off_dr, round_off_cr = compute_round_off(gro_amount)
        invoice_amount = round_money(
            gro_amount + (round_off_cr or ZERO) - (round_off_dr or ZERO)
        )

        if is_reverse_charge:
            supplier_amount = round_money(taxable_value) if taxable_value else invoice_amount
        else:
            supplier_amount = invoice_amount

        invoice_date = clean_string(row.get("invoiceDate"))

        record = CanonicalRecord(
            source_row_id=source_row_id,
            serial_no=source_row_id + 1,
            invoice_number=clean_string(row.get("invoiceNumber")),
            invoice_date=invoice_date,
            gstin=gstin or None,
            supplier_name=supplier_name,
            supplier_name_auto_filled=auto_filled,
            supplier_state=self.state_lookup.lookup(gstin[:2]),
            place_of_supply=self._place_of_supply(row),
            gst_registration_type=REGISTRATION_TYPES.get(invoice_type, invoice_type),
            filing_date=filing_date,
            invoice_value=invoice_value or None,
            taxable_value=taxable_value or None,
            igst=igst or None,
            cgst=cgst or None,
            sgst=sgst or None,
            cess=cess or None,
            reverse_charge=reverse_charge_label,
            is_reverse_charge=is_reverse_charge,
            itc_availability=normalize_itc_availability(row.get("itcAvailability")),
            slab=slab.slab if slab else None,
            ledgers=ledgers,
            gro_amount=gro_amount,
            round_off_dr=round_off_dr,
            round_off_cr=round_off_cr,
            invoice_amount=invoice_amount,
            supplier_amount=supplier_amount,
        )
        return ClassifiedRow(record=record, is_mismatched=slab is None)
