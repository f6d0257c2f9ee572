"""Source profiles describing how each filing export differs."""

from dataclasses import dataclass, field
from typing import Optional

from gstrsync.domain.entities import SourceType
from gstrsync.domain.errors import ValidationError, unknown_source_type

# GSTR-2A CSV column headers
GSTR2A_HEADERS = {
    "GSTIN of supplier": "gstin",
    "Supplier name": "supplierName",
    "Invoice number": "invoiceNumber",
    "Invoice type": "invoiceType",
    "Invoice Date": "invoiceDate",
    "Invoice Value (₹)": "invoiceValue",
    "Invoice Value (%u20B9)": "invoiceValue",
    "Place of supply": "placeOfSupply",
    "Supply Attract Reverse Charge": "reverseCharge",
    "Rate (%)": "ratePercent",
    "Taxable Value": "taxableValue",
    "Integrated Tax": "igst",
    "Central Tax": "cgst",
    "State/UT tax": "sgst",
    "Cess": "cess",
    "GSTR-1/IFF/GSTR-1A/GSTR-5 Filing Status": "gstrFilingStatus",
    "GSTR-3B Filing Status": "gstr3bFilingStatus",
    "Source": "source",
    "IRN": "irn",
    "IRN Date": "irnDate",
}

# GSTR-2B B2B sheet headers
GSTR2B_HEADERS = {
    "GSTIN of supplier": "gstin",
    "Trade/Legal name": "tradeName",
    "Invoice number": "invoiceNumber",
    "Invoice type": "invoiceType",
    "Invoice Date": "invoiceDate",
    "Invoice Value(₹)": "invoiceValue",
    "Place of supply": "placeOfSupply",
    "Supply Attract Reverse Charge": "reverseCharge",
    "Taxable Value (₹)": "taxableValue",
    "Integrated Tax(₹)": "igst",
    "Central Tax(₹)": "cgst",
    "State/UT Tax(₹)": "sgst",
    "Cess(₹)": "cess",
    "GSTR-1/1A/IFF/GSTR-5 Period": "gstrPeriod",
    "GSTR-1/1A/IFF/GSTR-5 Filing Date": "gstrFilingDate",
    "ITC Availability": "itcAvailability",
    "Reason": "reason",
    "Applicable % of Tax Rate": "taxRatePercent",
    "Source": "source",
    "IRN": "irn",
    "IRN Date": "irnDate",
}


@dataclass(frozen=True)
class SourceProfile:
    """Per-source settings that parameterise the single classification engine."""

    source_type: SourceType
    label: str
    header_row: int
    headers: dict[str, str] = field(default_factory=dict)
    rate_field: Optional[str] = None
    supplier_name_field: str = "supplierName"
    place_of_supply_fields: tuple[str, ...] = ("placeOfSupply",)
    filing_date_field: Optional[str] = None
    supplier_fields_editable: bool = False
    cess_in_reverse_charge_gross: bool = False
    merge_disallow_on_process: bool = False


GSTR_2A = SourceProfile(
    source_type=SourceType.GSTR_2A,
    label="GSTR-2A",
    header_row=3,
    headers=GSTR2A_HEADERS,
    rate_field="ratePercent",
    supplier_name_field="supplierName",
    place_of_supply_fields=("state", "placeOfSupply"),
    supplier_fields_editable=True,
)

GSTR_2B = SourceProfile(
    source_type=SourceType.GSTR_2B,
    label="GSTR-2B",
    header_row=1,
    headers=GSTR2B_HEADERS,
    supplier_name_field="tradeName",
    filing_date_field="gstrFilingDate",
    merge_disallow_on_process=True,
)

PROFILES = {profile.source_type: profile for profile in (GSTR_2A, GSTR_2B)}


def parse_source_type(value: "str | SourceType") -> SourceType:
    """Resolve "2A", "gstr-2b", etc. to a SourceType.

    Raises:
        ValidationError: If the value names no known source
    """
    if isinstance(value, SourceType):
        return value
    normalized = str(value).strip().upper().replace("GSTR", "").lstrip("-_ ")
    try:
        return SourceType(normalized)
    except ValueError:
        raise ValidationError(unknown_source_type(str(value)))


def get_profile(source_type: "str | SourceType") -> SourceProfile:
    """Return the profile for a source type."""
    return PROFILES[parse_source_type(source_type)]
