"""Domain model entities for gstrsync.

These are pure data classes representing the canonical record set and its
views, independent of the storage schema. Records are immutable: every edit
produces a new record via ``dataclasses.replace`` so a view row and its
canonical counterpart can never alias each other.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class SourceType(str, Enum):
    """Government filing export a raw import came from."""

    GSTR_2A = "2A"
    GSTR_2B = "2B"


class ViewName(str, Enum):
    """Addressable collections of a processed document."""

    CANONICAL = "canonical"
    REVERSE_CHARGE = "reverse-charge"
    MISMATCHED = "mismatched"
    DISALLOW = "disallow"


class TaxMode(str, Enum):
    """How the tax on a slab is split."""

    IGST = "IGST"
    CGST_SGST = "CGST_SGST"


SLAB_LABELS = ("5%", "12%", "18%", "28%")
CUSTOM_SLAB = "Custom"

EDITABLE_FIELDS = (
    "ledger_name",
    "accept_credit",
    "action",
    "action_reason",
    "narration",
    "itc_availability",
    "supplier_name",
)


class _Unset:
    """Marker for an edit field that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

EditValue = Union[Optional[str], _Unset]


@dataclass(frozen=True)
class SlabResolution:
    """Rate slab and tax split chosen for a row."""

    slab: str
    mode: TaxMode


@dataclass(frozen=True)
class SlabLedger:
    """Ledger amount, DR/CR flag and tax fields for one rate slab."""

    ledger_amount: Optional[Decimal] = None
    dr_cr: Optional[str] = None
    igst: Optional[Decimal] = None
    cgst: Optional[Decimal] = None
    sgst: Optional[Decimal] = None


def empty_ledgers() -> dict[str, SlabLedger]:
    """Return one blank ledger set per supported slab plus the custom set."""
    return {label: SlabLedger() for label in (*SLAB_LABELS, CUSTOM_SLAB)}


@dataclass(frozen=True)
class CanonicalRecord:
    """One classified invoice line.

    ``source_row_id`` is assigned once at classification and is the join key
    between the canonical set and every view. ``serial_no`` is the 1-based
    display position inside whichever collection holds the record.
    """

    source_row_id: int
    serial_no: int
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    gstin: Optional[str] = None
    supplier_name: Optional[str] = None
    supplier_name_auto_filled: bool = False
    supplier_state: Optional[str] = None
    place_of_supply: Optional[str] = None
    gst_registration_type: Optional[str] = None
    filing_date: Optional[str] = None
    invoice_value: Optional[Decimal] = None
    taxable_value: Optional[Decimal] = None
    igst: Optional[Decimal] = None
    cgst: Optional[Decimal] = None
    sgst: Optional[Decimal] = None
    cess: Optional[Decimal] = None
    reverse_charge: Optional[str] = None
    is_reverse_charge: bool = False
    itc_availability: Optional[str] = "Yes"
    slab: Optional[str] = None
    ledgers: dict[str, SlabLedger] = field(default_factory=empty_ledgers)
    ledger_name: Optional[str] = None
    accept_credit: Optional[str] = None
    action: Optional[str] = None
    action_reason: Optional[str] = None
    narration: Optional[str] = None
    gro_amount: Optional[Decimal] = None
    round_off_dr: Optional[Decimal] = None
    round_off_cr: Optional[Decimal] = None
    invoice_amount: Optional[Decimal] = None
    supplier_amount: Optional[Decimal] = None
    supplier_dr_cr: str = "CR"
    voucher_type: str = "PURCHASE"
    change_mode: str = "Accounting Invoice"
    is_manual: bool = False

    @property
    def voucher_number(self) -> Optional[str]:
        return self.invoice_number

    @property
    def reference_number(self) -> Optional[str]:
        return self.invoice_number

    @property
    def reference_date(self) -> Optional[str]:
        return self.invoice_date

    def ledger(self, slab: str) -> SlabLedger:
        """Return the ledger set for a slab label or ``CUSTOM_SLAB``."""
        return self.ledgers.get(slab, SlabLedger())


@dataclass(frozen=True)
class ClassifiedRow:
    """Classifier output: the record plus its mismatch flag."""

    record: CanonicalRecord
    is_mismatched: bool


@dataclass(frozen=True)
class EditRequest:
    """Partial ledger-field edit addressed to one row of a view.

    ``serial_no`` is matched against the target view's current numbering;
    ``index`` is a positional fallback into that view. Fields left as
    ``UNSET`` are untouched, while ``None`` clears the field.
    """

    serial_no: Optional[int] = None
    index: Optional[int] = None
    ledger_name: EditValue = UNSET
    accept_credit: EditValue = UNSET
    action: EditValue = UNSET
    action_reason: EditValue = UNSET
    narration: EditValue = UNSET
    itc_availability: EditValue = UNSET
    supplier_name: EditValue = UNSET

    def supplied_fields(self) -> dict[str, Optional[str]]:
        """Return the editable fields that were explicitly supplied."""
        return {
            name: getattr(self, name)
            for name in EDITABLE_FIELDS
            if getattr(self, name) is not UNSET
        }

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "EditRequest":
        """Build an edit request from a loosely keyed payload row.

        Accepts both attribute names (``ledger_name``) and the export column
        names (``"Ledger Name"``); keys that are absent stay ``UNSET``.
        """
        aliases = {
            "ledger_name": ("ledger_name", "ledgerName", "Ledger Name"),
            "accept_credit": ("accept_credit", "acceptCredit", "Accept Credit"),
            "action": ("action", "Action"),
            "action_reason": ("action_reason", "actionReason", "Action Reason"),
            "narration": ("narration", "Narration"),
            "itc_availability": ("itc_availability", "itcAvailability", "ITC Availability"),
            "supplier_name": ("supplier_name", "supplierName", "Supplier Name"),
        }
        values: dict[str, Any] = {}
        for name, keys in aliases.items():
            for key in keys:
                if key in data:
                    values[name] = data[key]
                    break

        def as_int(*keys: str) -> Optional[int]:
            for key in keys:
                raw = data.get(key)
                if raw is None or raw == "":
                    continue
                try:
                    return int(raw)
                except (TypeError, ValueError):
                    return None
            return None

        return cls(
            serial_no=as_int("serial_no", "serialNo", "slNo"),
            index=as_int("index"),
            **values,
        )


@dataclass(frozen=True)
class ProcessedDocument:
    """Canonical record set plus its three derived views for one import."""

    id: str
    source_type: SourceType
    company_id: Optional[str]
    canonical: tuple[CanonicalRecord, ...] = ()
    reverse_charge: tuple[CanonicalRecord, ...] = ()
    mismatched: tuple[CanonicalRecord, ...] = ()
    disallow: tuple[CanonicalRecord, ...] = ()
    processed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reconciled_with: Optional[str] = None

    def view(self, name: ViewName) -> tuple[CanonicalRecord, ...]:
        """Return the collection addressed by ``name``."""
        return {
            ViewName.CANONICAL: self.canonical,
            ViewName.REVERSE_CHARGE: self.reverse_charge,
            ViewName.MISMATCHED: self.mismatched,
            ViewName.DISALLOW: self.disallow,
        }[name]


@dataclass(frozen=True)
class RawImport:
    """Raw rows of one uploaded filing export."""

    id: str
    source_type: SourceType
    company_id: Optional[str]
    rows: tuple[dict[str, Any], ...]
    source_file_name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class StateCode:
    """GST state code to state name entry."""

    gst_code: str
    state_name: str


@dataclass(frozen=True)
class Party:
    """Party master entry used to resolve supplier display names."""

    id: int
    company_id: str
    gstin: str
    party_name: str
    created_at: datetime


@dataclass(frozen=True)
class PartyImportResult:
    """Outcome of a bulk party import."""

    imported: tuple[Party, ...]
    skipped: int


@dataclass(frozen=True)
class LedgerName:
    """Ledger name offered when assigning rows to ledgers."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of reconciling one document against another."""

    document: ProcessedDocument
    removed: int
    invoice_numbers: int

    @property
    def no_op(self) -> bool:
        return self.invoice_numbers == 0
