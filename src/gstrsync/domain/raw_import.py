"""Raw import domain service: ingest filing exports as raw rows."""

import csv
import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Iterable, Optional
from uuid import uuid4

from gstrsync.database.base import Database
from gstrsync.domain.entities import RawImport, SourceType
from gstrsync.domain.errors import NotFoundError, ValidationError, import_not_found
from gstrsync.domain.profiles import SourceProfile, get_profile

logger = logging.getLogger(__name__)


def map_row(headers: list[str], values: list[str], profile: SourceProfile) -> dict[str, Any]:
    """Map one CSV record to raw field keys using the profile's header map.

    Columns the profile does not know are dropped; blank cells become None.
    """
    row: dict[str, Any] = {}
    for header, value in zip(headers, values):
        key = profile.headers.get(header.strip())
        if key is None or key in row:
            continue
        value = value.strip() if value else ""
        row[key] = value or None
    return row


def read_export(csv_path: Path, profile: SourceProfile) -> list[dict[str, Any]]:
    """Read a filing export CSV into raw rows.

    Raises:
        ValidationError: If the header row is missing or carries no known column
    """
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter
        sample = f.read(4096)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        records = list(csv.reader(f, delimiter=delimiter))

    if len(records) < profile.header_row:
        raise ValidationError(
            f"CSV file has no header on row {profile.header_row} for {profile.label}"
        )

    headers = records[profile.header_row - 1]
    if not any(header.strip() in profile.headers for header in headers):
        raise ValidationError(
            f"CSV header on row {profile.header_row} has no {profile.label} columns"
        )

    rows = []
    for values in records[profile.header_row :]:
        if not any(value.strip() for value in values):
            continue
        row = map_row(headers, values, profile)
        if any(value is not None for value in row.values()):
            rows.append(row)
    return rows


class ImportService:
    """Service for storing and managing raw imports."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_import(
        self,
        rows: Iterable[dict[str, Any]],
        source_type: "str | SourceType",
        company_id: Optional[str],
        source_file_name: Optional[str] = None,
    ) -> RawImport:
        """Store raw rows as a new import.

        Args:
            rows: Raw field mappings, already keyed by raw field names
            source_type: Filing export the rows came from ("2A" or "2B")
            company_id: Owning company, used to pick party masters
            source_file_name: Optional name of the uploaded file

        Returns:
            The stored RawImport

        Raises:
            ValidationError: If the source type is unknown
        """
        profile = get_profile(source_type)
        raw_import = RawImport(
            id=str(uuid4()),
            source_type=profile.source_type,
            company_id=company_id,
            rows=tuple(dict(row) for row in rows),
            source_file_name=source_file_name,
            created_at=datetime.now(UTC),
        )
        self.db.create_import(raw_import)
        logger.info(
            "Stored %s import %s with %d rows",
            profile.label,
            raw_import.id,
            len(raw_import.rows),
        )
        return raw_import

    def import_csv(
        self,
        csv_file_path: str,
        source_type: "str | SourceType",
        company_id: Optional[str],
    ) -> RawImport:
        """Import a filing export CSV.

        Args:
            csv_file_path: Path to CSV file
            source_type: Filing export type ("2A" or "2B")
            company_id: Owning company

        Returns:
            The stored RawImport

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file carries no rows for the source type
        """
        profile = get_profile(source_type)
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        rows = read_export(csv_path, profile)
        if not rows:
            raise ValidationError(f"CSV file {csv_path.name} has no {profile.label} rows")
        return self.create_import(rows, profile.source_type, company_id, csv_path.name)

    def get_import(self, import_id: str) -> RawImport:
        """Get a raw import.

        Raises:
            NotFoundError: If the import doesn't exist
        """
        raw_import = self.db.get_import(import_id)
        if raw_import is None:
            raise NotFoundError(import_not_found(import_id))
        return raw_import

    def list_imports(self, company_id: Optional[str] = None) -> list[RawImport]:
        """List raw imports, newest first, optionally for one company."""
        return self.db.list_imports(company_id=company_id)

    def delete_import(self, import_id: str) -> None:
        """Delete a raw import together with its processed document.

        Raises:
            NotFoundError: If the import doesn't exist
        """
        if self.db.get_import(import_id) is None:
            raise NotFoundError(import_not_found(import_id))
        self.db.delete_processed(import_id)
        self.db.delete_import(import_id)
        logger.info("Deleted import %s", import_id)
