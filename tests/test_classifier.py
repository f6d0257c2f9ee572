"""Tests for row classification."""

import dataclasses
from decimal import Decimal

import pytest

from gstrsync.domain.classifier import (
    RowClassifier,
    compute_round_off,
    interpret_reverse_charge,
    normalize_itc_availability,
)
from gstrsync.domain.entities import CUSTOM_SLAB, Party, SLAB_LABELS
from gstrsync.domain.lookups import PartyLookup
from gstrsync.domain.profiles import GSTR_2A, GSTR_2B

from conftest import make_row


def non_null_ledger_amounts(record):
    return [
        label
        for label in (*SLAB_LABELS, CUSTOM_SLAB)
        if record.ledger(label).ledger_amount is not None
    ]


class TestInterpretReverseCharge:
    """Tests for the reverse-charge flag."""

    def test_truthy_values(self):
        for value in ("Yes", "y", "1", "TRUE", True):
            assert interpret_reverse_charge(value) == (True, "Yes")

    def test_falsy_values(self):
        for value in ("No", "n", "0", "false", False):
            assert interpret_reverse_charge(value) == (False, "No")

    def test_blank_and_unknown(self):
        assert interpret_reverse_charge(None) == (False, None)
        assert interpret_reverse_charge("  ") == (False, None)
        assert interpret_reverse_charge("Partly") == (False, "Partly")


def test_normalize_itc_availability():
    """ITC availability defaults to Yes and normalises yes/no."""
    assert normalize_itc_availability(None) == "Yes"
    assert normalize_itc_availability("n") == "No"
    assert normalize_itc_availability("YES") == "Yes"
    assert normalize_itc_availability("Temporary") == "Temporary"


class TestComputeRoundOff:
    """Tests for round-off splitting."""

    def test_integral_amount(self):
        assert compute_round_off(Decimal("1180.00")) == (None, None)

    def test_small_fraction_is_debited(self):
        assert compute_round_off(Decimal("100.25")) == (Decimal("0.25"), None)

    def test_large_fraction_is_credited(self):
        assert compute_round_off(Decimal("100.75")) == (None, Decimal("0.25"))

    def test_half_is_credited(self):
        assert compute_round_off(Decimal("100.50")) == (None, Decimal("0.50"))


class TestRowClassifier:
    """Tests for RowClassifier.classify."""

    def test_matched_igst_row(self, state_lookup):
        """1000 taxable with 180 IGST lands in the 18% ledger."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        result = classifier.classify(make_row("INV-1"), 0)
        record = result.record

        assert result.is_mismatched is False
        assert record.slab == "18%"
        ledger = record.ledger("18%")
        assert ledger.ledger_amount == Decimal("1000")
        assert ledger.dr_cr == "DR"
        assert ledger.igst == Decimal("180")
        assert ledger.cgst is None
        assert non_null_ledger_amounts(record) == ["18%"]
        assert record.gro_amount == Decimal("1180.00")
        assert record.round_off_dr is None
        assert record.round_off_cr is None
        assert record.invoice_amount == Decimal("1180.00")
        assert record.supplier_amount == Decimal("1180.00")
        assert record.supplier_state == "Maharashtra"
        assert record.serial_no == 1
        assert record.source_row_id == 0

    def test_mismatched_row_uses_custom_ledger(self, state_lookup):
        """150 IGST on 1000 matches no slab."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        result = classifier.classify(make_row("INV-2", igst="150"), 1)
        record = result.record

        assert result.is_mismatched is True
        assert record.slab is None
        custom = record.ledger(CUSTOM_SLAB)
        assert custom.ledger_amount == Decimal("1000")
        assert custom.dr_cr == "DR"
        assert custom.igst == Decimal("150")
        assert non_null_ledger_amounts(record) == [CUSTOM_SLAB]
        assert record.invoice_amount == Decimal("1150.00")

    def test_cgst_sgst_row(self, state_lookup):
        """Central and state halves are both recorded on the slab."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        row = make_row("INV-3", taxable="500", igst="0", cgst="45", sgst="45")
        record = classifier.classify(row, 0).record

        ledger = record.ledger("18%")
        assert ledger.cgst == Decimal("45")
        assert ledger.sgst == Decimal("45")
        assert ledger.igst is None
        assert record.gro_amount == Decimal("590.00")

    def test_cess_excluded_from_reverse_charge_gross(self, state_lookup):
        """Reverse-charge gross leaves cess out and supplier amount is taxable."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        row = make_row("INV-5", cess="20", reverseCharge="Yes")
        record = classifier.classify(row, 0).record

        assert record.is_reverse_charge is True
        assert record.reverse_charge == "Yes"
        assert record.gro_amount == Decimal("1180.00")
        assert record.supplier_amount == Decimal("1000.00")

    def test_cess_included_in_regular_gross(self, state_lookup):
        classifier = RowClassifier(GSTR_2A, state_lookup)
        record = classifier.classify(make_row("INV-6", cess="20"), 0).record
        assert record.gro_amount == Decimal("1200.00")

    def test_round_off_on_fractional_gross(self, state_lookup):
        """A fractional gross is rounded through the round-off entries."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        record = classifier.classify(
            make_row("INV-7", taxable="1000.40", igst="180.07"), 0
        ).record

        assert record.gro_amount == Decimal("1180.47")
        assert record.round_off_dr == Decimal("0.47")
        assert record.invoice_amount == Decimal("1180.00")

    def test_zero_taxable_uses_invoice_value(self, state_lookup):
        """Without taxable value the custom ledger carries the invoice value."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        row = make_row("INV-8", taxable="", igst="0", invoiceValue="500")
        result = classifier.classify(row, 0)

        assert result.is_mismatched is True
        assert result.record.ledger(CUSTOM_SLAB).ledger_amount == Decimal("500")

    def test_malformed_amounts_do_not_raise(self, state_lookup):
        classifier = RowClassifier(GSTR_2A, state_lookup)
        row = make_row("INV-9", taxable="abc", igst="n/a")
        result = classifier.classify(row, 0)

        assert result.is_mismatched is True
        assert result.record.ledger(CUSTOM_SLAB).ledger_amount == Decimal("0")
        assert result.record.ledger(CUSTOM_SLAB).dr_cr is None

    def test_party_master_overrides_supplier_name(self, state_lookup):
        """A party master for the GSTIN supplies the display name."""
        parties = PartyLookup(
            [Party(id=1, company_id="C1", gstin="27aaaaa0000a1z5", party_name="Acme", created_at=None)]
        )
        classifier = RowClassifier(GSTR_2A, state_lookup, parties)
        record = classifier.classify(make_row("INV-1"), 0).record

        assert record.supplier_name == "Acme"
        assert record.supplier_name_auto_filled is True

    def test_supplier_name_field_depends_on_profile(self, state_lookup):
        row = make_row("INV-1")
        assert RowClassifier(GSTR_2A, state_lookup).classify(row, 0).record.supplier_name == (
            "Supplier INV-1"
        )
        assert RowClassifier(GSTR_2B, state_lookup).classify(row, 0).record.supplier_name == (
            "Trader INV-1"
        )

    def test_presentation_fields(self, state_lookup):
        classifier = RowClassifier(GSTR_2B, state_lookup)
        row = make_row("INV-1", gstrFilingDate="2024-02-11")
        record = classifier.classify(row, 4).record

        assert record.serial_no == 5
        assert record.voucher_number == "INV-1"
        assert record.reference_date == "15/01/2024"
        assert record.voucher_type == "PURCHASE"
        assert record.supplier_dr_cr == "CR"
        assert record.gst_registration_type == "Regular"
        assert record.filing_date == "11/02/2024"

    def test_unknown_state_prefix(self, state_lookup):
        classifier = RowClassifier(GSTR_2A, state_lookup)
        record = classifier.classify(make_row("INV-1", gstin="99ZZZZZ"), 0).record
        assert record.supplier_state is None

    def test_explicit_rate_column_on_2a(self, state_lookup):
        """GSTR-2A rows carry a rate column that is used first."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        row = make_row("INV-1", igst="150", ratePercent="12")
        result = classifier.classify(row, 0)
        assert result.record.slab == "12%"
        assert result.is_mismatched is False

    def test_cess_in_reverse_charge_gross_profile(self, state_lookup):
        """A profile may keep cess in the reverse-charge gross."""
        profile = dataclasses.replace(GSTR_2A, cess_in_reverse_charge_gross=True)
        classifier = RowClassifier(profile, state_lookup)
        row = make_row("INV-5", cess="20", reverseCharge="Yes")
        record = classifier.classify(row, 0).record

        assert record.is_reverse_charge is True
        assert record.gro_amount == Decimal("1200.00")
        assert record.invoice_amount == Decimal("1200.00")
        assert record.supplier_amount == Decimal("1000.00")

    @pytest.mark.parametrize("filing_date", [10**8, float("inf"), "31/02/2024"])
    def test_out_of_range_filing_date_does_not_raise(self, state_lookup, filing_date):
        """Unreadable filing dates are shown as given."""
        classifier = RowClassifier(GSTR_2B, state_lookup)
        row = make_row("INV-1", gstrFilingDate=filing_date)
        record = classifier.classify(row, 0).record

        assert record.filing_date == str(filing_date)
        assert record.slab == "18%"

    @pytest.mark.parametrize("taxable", ["1E+30", "-1E+30", 1e30])
    def test_out_of_range_amount_does_not_raise(self, state_lookup, taxable):
        """Amounts too large to round to paise are treated as malformed."""
        classifier = RowClassifier(GSTR_2A, state_lookup)
        result = classifier.classify(make_row("INV-1", taxable=taxable, igst="0"), 0)

        assert result.is_mismatched is True
        assert result.record.ledger(CUSTOM_SLAB).ledger_amount == Decimal("0")
        assert result.record.invoice_amount == Decimal("0.00")


@pytest.mark.parametrize(
    "taxable,igst,expected_gross",
    [
        ("1000.01", "180", Decimal("1180.01")),
        ("1000.49", "180", Decimal("1180.49")),
        ("1000.50", "180", Decimal("1180.50")),
        ("1000.51", "180", Decimal("1180.51")),
        ("1000.99", "180", Decimal("1180.99")),
        ("1000", "180", Decimal("1180.00")),
        ("1000", "150.49", Decimal("1150.49")),
        ("0.3333", "0.06", Decimal("0.39")),
        ("-100.49", "0", Decimal("-100.49")),
        ("-1000.51", "0", Decimal("-1000.51")),
    ],
)
def test_classified_amounts_invariants(state_lookup, taxable, igst, expected_gross):
    """Invoice amount is whole paise within a unit of gross and one ledger is used."""
    classifier = RowClassifier(GSTR_2A, state_lookup)
    record = classifier.classify(make_row("INV-1", taxable=taxable, igst=igst), 0).record

    assert record.gro_amount == expected_gross
    assert record.invoice_amount.as_tuple().exponent == -2
    assert abs(record.invoice_amount - record.gro_amount) < 1
    assert record.invoice_amount == record.invoice_amount.to_integral_value()
    assert len(non_null_ledger_amounts(record)) == 1
