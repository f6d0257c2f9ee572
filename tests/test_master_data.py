"""Domain tests for state codes, party masters and ledger names."""

import pytest

from gstrsync.domain.errors import ConflictError, NotFoundError, ValidationError
from gstrsync.domain.master_data import DEFAULT_LEDGER_NAMES, MasterDataService


def test_seed_state_codes(temp_db):
    service = MasterDataService(temp_db)

    created = service.seed_state_codes([("7", "Delhi"), ("27", "Maharashtra")])

    assert created == 2
    assert [(s.gst_code, s.state_name) for s in service.list_state_codes()] == [
        ("07", "Delhi"),
        ("27", "Maharashtra"),
    ]


def test_seed_skips_populated_table(master_data):
    assert master_data.seed_state_codes([("07", "Delhi")]) == 0
    assert len(master_data.list_state_codes()) == 4


def test_seed_force_replaces(master_data):
    assert master_data.seed_state_codes([("07", "Delhi")], force=True) == 1
    assert [s.gst_code for s in master_data.list_state_codes()] == ["07"]


class TestParties:
    """Tests for party master management."""

    def test_add_and_list(self, master_data):
        party = master_data.add_party("C1", " 27aaaaa0000a1z5 ", "Acme Traders")

        assert party.gstin == "27AAAAA0000A1Z5"
        assert [p.party_name for p in master_data.list_parties("C1")] == ["Acme Traders"]
        assert master_data.list_parties("C2") == []

    def test_duplicate_rejected(self, master_data):
        master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        with pytest.raises(ConflictError):
            master_data.add_party("C1", "27aaaaa0000a1z5", "Acme Again")

    def test_same_gstin_other_company(self, master_data):
        master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        party = master_data.add_party("C2", "27AAAAA0000A1Z5", "Acme")
        assert party.company_id == "C2"

    def test_invalid_input(self, master_data):
        with pytest.raises(ValidationError):
            master_data.add_party("C1", "27AAA", "Short")
        with pytest.raises(ValidationError):
            master_data.add_party("C1", "27AAAAA0000A1Z5", "  ")

    def test_remove(self, master_data):
        party = master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        master_data.remove_party(party.id)
        assert master_data.list_parties("C1") == []

    def test_remove_missing(self, master_data):
        with pytest.raises(NotFoundError):
            master_data.remove_party(999)

    def test_update(self, master_data):
        party = master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")

        updated = master_data.update_party(party.id, gstin=" 24bbbbb1111b1z5 ", party_name=" Acme Ltd ")

        assert updated.gstin == "24BBBBB1111B1Z5"
        assert updated.party_name == "Acme Ltd"
        assert master_data.list_parties("C1") == [updated]

    def test_update_keeps_own_gstin(self, master_data):
        party = master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        updated = master_data.update_party(party.id, gstin="27aaaaa0000a1z5")
        assert updated.party_name == "Acme"

    def test_update_duplicate_gstin(self, master_data):
        master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        other = master_data.add_party("C1", "24BBBBB1111B1Z5", "Patel")
        master_data.add_party("C2", "29DDDDD3333D1Z5", "Kaveri")

        with pytest.raises(ConflictError):
            master_data.update_party(other.id, gstin="27AAAAA0000A1Z5")
        assert master_data.update_party(other.id, gstin="29DDDDD3333D1Z5").gstin == (
            "29DDDDD3333D1Z5"
        )

    def test_update_invalid(self, master_data):
        party = master_data.add_party("C1", "27AAAAA0000A1Z5", "Acme")
        with pytest.raises(ValidationError):
            master_data.update_party(party.id, gstin="27AAA")
        with pytest.raises(ValidationError):
            master_data.update_party(party.id, party_name="   ")
        with pytest.raises(NotFoundError):
            master_data.update_party(999, party_name="Ghost")


class TestPartyImport:
    """Tests for bulk party import from a purchase register."""

    def test_import_register(self, master_data, fixtures_dir):
        """Title rows are skipped and repeats within the file are dropped."""
        result = master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C1")

        assert [(p.gstin, p.party_name) for p in result.imported] == [
            ("27AAAAA0000A1Z5", "Shree Traders"),
            ("24BBBBB1111B1Z5", "Patel Logistics"),
            ("29DDDDD3333D1Z5", "Kaveri Steels"),
        ]
        assert result.skipped == 1
        assert len(master_data.list_parties("C1")) == 3

    def test_import_skips_existing_gstins(self, master_data, fixtures_dir):
        master_data.add_party("C1", "24BBBBB1111B1Z5", "Patel Bros")

        result = master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C1")

        assert [p.gstin for p in result.imported] == ["27AAAAA0000A1Z5", "29DDDDD3333D1Z5"]
        assert result.skipped == 2
        names = {p.gstin: p.party_name for p in master_data.list_parties("C1")}
        assert names["24BBBBB1111B1Z5"] == "Patel Bros"

    def test_import_all_duplicates(self, master_data, fixtures_dir):
        master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C1")
        with pytest.raises(ConflictError) as excinfo:
            master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C1")
        assert "duplicates" in str(excinfo.value)

    def test_import_other_company_independent(self, master_data, fixtures_dir):
        master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C1")
        result = master_data.import_parties_csv(fixtures_dir / "purchase_register.csv", "C2")
        assert len(result.imported) == 3

    def test_import_without_header(self, master_data, tmp_path):
        path = tmp_path / "register.csv"
        path.write_text("Date,Party,GSTIN\n01-04-2024,Acme,27AAAAA0000A1Z5\n")
        with pytest.raises(ValidationError):
            master_data.import_parties_csv(path, "C1")

    def test_import_without_parties(self, master_data, tmp_path):
        path = tmp_path / "register.csv"
        path.write_text("Particulars,GSTIN/UIN\nCash,\n")
        with pytest.raises(ValidationError):
            master_data.import_parties_csv(path, "C1")

    def test_import_missing_file(self, master_data, tmp_path):
        with pytest.raises(FileNotFoundError):
            master_data.import_parties_csv(tmp_path / "missing.csv", "C1")


class TestLedgerNames:
    """Tests for the ledger name master."""

    def test_seed_defaults_once(self, master_data):
        count = master_data.seed_ledger_names()

        assert count == len(DEFAULT_LEDGER_NAMES)
        assert master_data.seed_ledger_names() == 0
        assert len(master_data.list_ledger_names()) == count

    def test_seed_dedupes_case_insensitively(self, master_data):
        count = master_data.seed_ledger_names([" Salary ", "salary", "Wages", "", "WAGES"])

        assert count == 2
        assert [ledger.name for ledger in master_data.list_ledger_names()] == ["Salary", "Wages"]

    def test_list_sorted_case_insensitively(self, master_data):
        master_data.seed_ledger_names(["bank Charges", "Advertisement", "Cleaning"])
        names = [ledger.name for ledger in master_data.list_ledger_names()]
        assert names == ["Advertisement", "bank Charges", "Cleaning"]

    def test_add(self, master_data):
        ledger = master_data.add_ledger_name("  Courier Charges ")
        assert ledger.name == "Courier Charges"
        assert master_data.list_ledger_names() == [ledger]

    def test_add_duplicate_or_blank(self, master_data):
        master_data.add_ledger_name("Salary")
        with pytest.raises(ConflictError):
            master_data.add_ledger_name(" SALARY ")
        with pytest.raises(ValidationError):
            master_data.add_ledger_name("   ")

    def test_rename(self, master_data):
        ledger = master_data.add_ledger_name("Salry")
        other = master_data.add_ledger_name("Wages")

        renamed = master_data.rename_ledger_name(ledger.id, "Salary")
        assert renamed.name == "Salary"
        assert master_data.rename_ledger_name(ledger.id, "SALARY").name == "SALARY"
        with pytest.raises(ConflictError):
            master_data.rename_ledger_name(other.id, "salary")
        with pytest.raises(ValidationError):
            master_data.rename_ledger_name(other.id, "")
        with pytest.raises(NotFoundError):
            master_data.rename_ledger_name(999, "Ghost")

    def test_remove(self, master_data):
        ledger = master_data.add_ledger_name("Salary")
        master_data.remove_ledger_name(ledger.id)
        assert master_data.list_ledger_names() == []
        with pytest.raises(NotFoundError):
            master_data.remove_ledger_name(ledger.id)
