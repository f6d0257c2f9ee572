"""Master data domain service: state codes, party masters and ledger names."""

import csv
import logging
from pathlib import Path
from typing import Iterable, Optional

from gstrsync.database.base import Database
from gstrsync.domain.entities import LedgerName, Party, PartyImportResult, StateCode
from gstrsync.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    all_parties_duplicate,
    duplicate_ledger_name,
    duplicate_party,
    ledger_name_not_found,
    ledger_name_required,
    no_parties_in_file,
    party_header_not_found,
    party_not_found,
)
from gstrsync.utils.text import clean_string, normalize_key

logger = logging.getLogger(__name__)

GSTIN_LENGTH = 15

# Rows searched for the party register header
PARTY_HEADER_SCAN_ROWS = 10
PARTY_NAME_HEADER = "particular"
PARTY_GSTIN_HEADER = "gstin/uin"

DEFAULT_LEDGER_NAMES = (
    "Insurance Expense",
    "Freight & Octroi Expense",
    "Transportation Charges",
    "Rate & Taxes",
    "Security Expense [RCM]",
    "Cleaning Expense",
    "Discount & Kasar",
    "Royalty / Lease Expense",
    "Petrol and diesel Expense",
    "Director's Remuneration",
    "Salary",
    "Wages",
    "License Fees",
    "Commission & Brokerage Charges",
    "Advertisement Expenses",
    "Sales Promotion Expense",
    "Business Promotion Expense",
    "Professional Tax",
    "Penalty [disallow]",
    "Telephone & Mobile Expense",
    "Financial Charges",
    "Bank Charges",
    "Repair & Maintenance Expense",
    "Vehicles Expense",
    "Internet Charges",
    "Packing Material GST",
    "Raw Material GST",
    "Freight on Purchase [GST]",
    "Raw Material - OGS",
    "Store & Consumable",
    "Labour Purchase [GST]",
    "Travelling Exp.",
    "Stationery & Printing",
    "Repair of Vehicle [GST]",
    "Repair of Vehicle [disallow]",
    "Repair of Electrical",
    "Store & Consumabel - OGS",
    "Freight on Purchase [RCM]",
    "Testing Charges",
    "Oil,Grease & Kerosin",
    "Labour Purchase [Non GST]",
    "Account Writting Fees",
    "Manpower Power Service",
    "Administrative Exp",
    "Repair of Computer Exp",
    "Labour Welfare Exp.",
    "Mould & Tools [15%]",
    "Insurance of Vehicle [disallow]",
    "Legal & Profession Exp.",
    "GiDC Exp.",
    "Software Renewal Exp",
    "Testing Equipment [15%]",
    "Machinery [15%]",
    "Repair of Machinery",
    "Office Equipment",
    "Computer",
    "Pooja Exp.",
    "Repair of Office Equipment",
    "Festival Exp. [disallow]",
)


def ledger_key(name: Optional[str]) -> str:
    """Comparison key for ledger names: trimmed and lower-cased."""
    return (name or "").strip().lower()


def find_party_header(records: list[list[str]]) -> Optional[int]:
    """Return the index of the first row naming both party register columns."""
    for index, record in enumerate(records[:PARTY_HEADER_SCAN_ROWS]):
        cells = [cell.strip().lower() for cell in record]
        if any(PARTY_NAME_HEADER in cell for cell in cells) and any(
            PARTY_GSTIN_HEADER in cell for cell in cells
        ):
            return index
    return None


def read_party_register(csv_path: Path) -> list[tuple[str, str]]:
    """Read (gstin, party_name) pairs from a purchase register export.

    The register may open with title rows; the header is the first row
    with a "Particulars" and a "GSTIN/UIN" column. Rows missing either
    value are skipped.

    Raises:
        ValidationError: If no header row is found
    """
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        records = list(csv.reader(f))

    header_index = find_party_header(records)
    if header_index is None:
        raise ValidationError(party_header_not_found(csv_path.name))

    header = [cell.strip().lower() for cell in records[header_index]]
    name_col = next(i for i, cell in enumerate(header) if PARTY_NAME_HEADER in cell)
    gstin_col = next(i for i, cell in enumerate(header) if PARTY_GSTIN_HEADER in cell)

    entries = []
    for record in records[header_index + 1 :]:
        if len(record) <= max(name_col, gstin_col):
            continue
        name = clean_string(record[name_col])
        gstin = clean_string(record[gstin_col])
        if name and gstin:
            entries.append((gstin, name))
    return entries


class MasterDataService:
    """Service for managing the lookup tables used during classification."""

    def __init__(self, db: Database):
        """Initialize master data service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_state_codes(self, entries: Iterable[tuple[str, str]], force: bool = False) -> int:
        """Load the state-code table.

        Args:
            entries: (gst_code, state_name) pairs
            force: Replace any existing entries

        Returns:
            Number of entries written; 0 when the table is already populated
            and ``force`` is not set
        """
        if self.db.list_state_codes() and not force:
            return 0
        codes = [
            StateCode(gst_code=str(code).strip().zfill(2), state_name=name.strip())
            for code, name in entries
        ]
        if force:
            self.db.clear_state_codes()
        self.db.add_state_codes(codes)
        logger.info("Seeded %d state codes", len(codes))
        return len(codes)

    def list_state_codes(self) -> list[StateCode]:
        """List state codes ordered by code."""
        return self.db.list_state_codes()

    def add_party(self, company_id: str, gstin: str, party_name: str) -> Party:
        """Register a party name for a supplier GSTIN.

        Args:
            company_id: Owning company
            gstin: Supplier GSTIN (stored upper-case)
            party_name: Display name used for the supplier

        Returns:
            The stored Party

        Raises:
            ValidationError: If a field is blank or the GSTIN is malformed
            ConflictError: If the company already has a party for the GSTIN
        """
        company = clean_string(company_id)
        name = clean_string(party_name)
        key = normalize_key(gstin)
        if not company or not name or not key:
            raise ValidationError("Company, GSTIN and party name are required")
        if len(key) != GSTIN_LENGTH:
            raise ValidationError(f"GSTIN '{key}' must be {GSTIN_LENGTH} characters")
        if self.db.get_party_by_gstin(company, key) is not None:
            raise ConflictError(duplicate_party(key, company))

        party = self.db.create_party(company_id=company, gstin=key, party_name=name)
        logger.info("Added party %s for company %s", key, company)
        return party

    def list_parties(self, company_id: str) -> list[Party]:
        """List the parties of a company ordered by name."""
        return self.db.list_parties(company_id)

    def remove_party(self, party_id: int) -> None:
        """Delete a party master entry.

        Raises:
            NotFoundError: If the party doesn't exist
        """
        if self.db.get_party(party_id) is None:
            raise NotFoundError(party_not_found(party_id))
        self.db.delete_party(party_id)

    def update_party(
        self,
        party_id: int,
        gstin: Optional[str] = None,
        party_name: Optional[str] = None,
    ) -> Party:
        """Change a party's GSTIN or name.

        Raises:
            NotFoundError: If the party doesn't exist
            ValidationError: If a given value is blank or the GSTIN is malformed
            ConflictError: If another party of the company has the GSTIN
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        key = None
        if gstin is not None:
            key = normalize_key(gstin)
            if len(key) != GSTIN_LENGTH:
                raise ValidationError(f"GSTIN '{key}' must be {GSTIN_LENGTH} characters")
            other = self.db.get_party_by_gstin(party.company_id, key)
            if other is not None and other.id != party_id:
                raise ConflictError(duplicate_party(key, party.company_id))

        name = None
        if party_name is not None:
            name = clean_string(party_name)
            if not name:
                raise ValidationError("Party name cannot be blank")

        return self.db.update_party(party_id, gstin=key, party_name=name)

    def import_parties_csv(self, csv_file_path: str, company_id: str) -> PartyImportResult:
        """Bulk-load party masters from a purchase register CSV.

        GSTINs already registered for the company, and repeats within the
        file, are skipped.

        Args:
            csv_file_path: Path to the register export
            company_id: Owning company

        Returns:
            PartyImportResult with the created parties and the skipped count

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file has no parties or every party is a duplicate
        """
        company = clean_string(company_id)
        if not company:
            raise ValidationError("Company is required")
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        entries = read_party_register(csv_path)
        if not entries:
            raise ValidationError(no_parties_in_file(csv_path.name))

        seen = {party.gstin.strip().upper() for party in self.db.list_parties(company)}
        unique = []
        for gstin, name in entries:
            key = normalize_key(gstin)
            if key in seen:
                continue
            seen.add(key)
            unique.append((key, name))

        if not unique:
            raise ConflictError(all_parties_duplicate(csv_path.name))

        created = self.db.create_parties(company, unique)
        skipped = len(entries) - len(created)
        logger.info(
            "Imported %d parties for company %s (%d skipped)", len(created), company, skipped
        )
        return PartyImportResult(imported=tuple(created), skipped=skipped)

    def seed_ledger_names(self, names: Iterable[str] = DEFAULT_LEDGER_NAMES) -> int:
        """Load the default ledger names into an empty table.

        Names are trimmed and deduplicated case-insensitively, keeping the
        first spelling.

        Returns:
            Number of names written; 0 when the table is already populated
        """
        if self.db.list_ledger_names():
            return 0
        seen: set[str] = set()
        unique = []
        for name in names:
            key = ledger_key(name)
            if not key or key in seen:
                continue
            seen.add(key)
            unique.append(name.strip())
        self.db.create_ledger_names(unique)
        logger.info("Seeded %d ledger names", len(unique))
        return len(unique)

    def list_ledger_names(self) -> list[LedgerName]:
        """List ledger names in case-insensitive order."""
        return self.db.list_ledger_names()

    def _check_ledger_name(self, name: str, exclude_id: Optional[int] = None) -> str:
        trimmed = clean_string(name)
        if not trimmed:
            raise ValidationError(ledger_name_required())
        key = ledger_key(trimmed)
        for ledger in self.db.list_ledger_names():
            if ledger.id != exclude_id and ledger_key(ledger.name) == key:
                raise ConflictError(duplicate_ledger_name(trimmed))
        return trimmed

    def add_ledger_name(self, name: str) -> LedgerName:
        """Add a ledger name.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name exists in any letter case
        """
        trimmed = self._check_ledger_name(name)
        (ledger,) = self.db.create_ledger_names([trimmed])
        return ledger

    def rename_ledger_name(self, ledger_id: int, name: str) -> LedgerName:
        """Rename a ledger name.

        Raises:
            NotFoundError: If the ledger name doesn't exist
            ValidationError: If the new name is blank
            ConflictError: If another ledger has the name in any letter case
        """
        if self.db.get_ledger_name(ledger_id) is None:
            raise NotFoundError(ledger_name_not_found(ledger_id))
        trimmed = self._check_ledger_name(name, exclude_id=ledger_id)
        return self.db.rename_ledger_name(ledger_id, trimmed)

    def remove_ledger_name(self, ledger_id: int) -> None:
        """Delete a ledger name.

        Raises:
            NotFoundError: If the ledger name doesn't exist
        """
        if self.db.get_ledger_name(ledger_id) is None:
            raise NotFoundError(ledger_name_not_found(ledger_id))
        self.db.delete_ledger_name(ledger_id)
