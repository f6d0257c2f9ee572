"""GST rate slab resolution."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from gstrsync.domain.entities import SlabResolution, TaxMode


@dataclass(frozen=True)
class SlabRate:
    label: str
    igst: Decimal
    cgst: Decimal
    sgst: Decimal


SLAB_CONFIG = (
    SlabRate("5%", Decimal("5"), Decimal("2.5"), Decimal("2.5")),
    SlabRate("12%", Decimal("12"), Decimal("6"), Decimal("6")),
    SlabRate("18%", Decimal("18"), Decimal("9"), Decimal("9")),
    SlabRate("28%", Decimal("28"), Decimal("14"), Decimal("14")),
)

# Percentage points a computed rate may drift from the slab rate
SLAB_TOLERANCE = Decimal("0.1")


def resolve_slab(
    taxable_value: Optional[Decimal],
    igst: Optional[Decimal],
    cgst: Optional[Decimal],
    rate_percent: Optional[Decimal] = None,
) -> Optional[SlabResolution]:
    """Determine the rate slab and tax split for a row.

    An explicit rate equal to a supported slab wins outright. Otherwise the
    rate is derived from IGST (preferred) or CGST over the taxable value and
    matched within ``SLAB_TOLERANCE``. A zero or missing taxable value never
    matches.

    Args:
        taxable_value: Taxable value of the line
        igst: Integrated tax amount
        cgst: Central tax amount
        rate_percent: Rate column value, when the source carries one

    Returns:
        SlabResolution, or None when no supported slab fits
    """
    if not taxable_value:
        return None

    igst = igst or Decimal("0")
    cgst = cgst or Decimal("0")

    if rate_percent:
        for slab in SLAB_CONFIG:
            if rate_percent == slab.igst:
                mode = TaxMode.IGST if igst > 0 else TaxMode.CGST_SGST
                return SlabResolution(slab=slab.label, mode=mode)

    if igst > 0:
        percent = igst / taxable_value * 100
        for slab in SLAB_CONFIG:
            if abs(percent - slab.igst) <= SLAB_TOLERANCE:
                return SlabResolution(slab=slab.label, mode=TaxMode.IGST)
    elif cgst > 0:
        percent = cgst / taxable_value * 100
        for slab in SLAB_CONFIG:
            if abs(percent - slab.cgst) <= SLAB_TOLERANCE:
                return SlabResolution(slab=slab.label, mode=TaxMode.CGST_SGST)

    return None
