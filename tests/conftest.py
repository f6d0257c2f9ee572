"""Shared pytest fixtures for gstrsync tests."""

import tempfile
import os
from pathlib import Path
import pytest

from gstrsync.database.factories import create_sqlite_database
from gstrsync.domain.entities import StateCode
from gstrsync.domain.lookups import StateLookup
from gstrsync.domain.master_data import MasterDataService
from gstrsync.domain.processing import DocumentProcessor
from gstrsync.domain.raw_import import ImportService
from gstrsync.domain.reconciliation import Reconciler
from gstrsync.domain.synchronization import ViewSynchronizer


SAMPLE_STATES = [
    ("24", "Gujarat"),
    ("27", "Maharashtra"),
    ("29", "Karnataka"),
    ("33", "Tamil Nadu"),
]


def make_row(
    invoice_number,
    gstin="27AAAAA0000A1Z5",
    taxable="1000",
    igst="180",
    cgst="0",
    sgst="0",
    **extra,
):
    """Build a raw import row keyed by raw field names."""
    row = {
        "invoiceNumber": invoice_number,
        "gstin": gstin,
        "supplierName": f"Supplier {invoice_number}",
        "tradeName": f"Trader {invoice_number}",
        "invoiceDate": "15/01/2024",
        "invoiceType": "R",
        "taxableValue": taxable,
        "igst": igst,
        "cgst": cgst,
        "sgst": sgst,
        "cess": "0",
        "reverseCharge": "No",
    }
    row.update(extra)
    return row


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def seeded_db(temp_db):
    """Temporary database with a few state codes loaded."""
    MasterDataService(temp_db).seed_state_codes(SAMPLE_STATES)
    return temp_db


@pytest.fixture
def state_lookup():
    """State lookup built from the sample state codes."""
    return StateLookup(StateCode(gst_code=code, state_name=name) for code, name in SAMPLE_STATES)


@pytest.fixture
def import_service(seeded_db):
    """Create an ImportService with a seeded temporary database."""
    return ImportService(seeded_db)


@pytest.fixture
def processor(seeded_db):
    """Create a DocumentProcessor with a seeded temporary database."""
    return DocumentProcessor(seeded_db)


@pytest.fixture
def synchronizer(seeded_db):
    """Create a ViewSynchronizer with a seeded temporary database."""
    return ViewSynchronizer(seeded_db)


@pytest.fixture
def reconciler(seeded_db):
    """Create a Reconciler with a seeded temporary database."""
    return Reconciler(seeded_db)


@pytest.fixture
def master_data(seeded_db):
    """Create a MasterDataService with a seeded temporary database."""
    return MasterDataService(seeded_db)


@pytest.fixture
def sample_rows():
    """Rows covering a slab match, a mismatch, reverse charge and ITC disallowed.

    - INV-1: IGST 18% on 1000 (matched, 18%)
    - INV-2: IGST 150 on 1000 (15%, mismatched)
    - INV-3: reverse charge, CGST/SGST 9% each on 500
    - INV-4: IGST 5% on 200 with ITC availability "No"
    """
    return [
        make_row("INV-1"),
        make_row("INV-2", igst="150"),
        make_row(
            "INV-3",
            gstin="29BBBBB1111B1Z5",
            taxable="500",
            igst="0",
            cgst="45",
            sgst="45",
            reverseCharge="Yes",
        ),
        make_row("INV-4", taxable="200", igst="10", itcAvailability="No"),
    ]


@pytest.fixture
def processed_2a(import_service, processor, sample_rows):
    """Sample rows imported as GSTR-2A and processed."""
    raw_import = import_service.create_import(sample_rows, "2A", "C1")
    return processor.process(raw_import.id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
