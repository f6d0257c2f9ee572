"""Document processing: classify an import and persist its views."""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Iterable, Optional

from gstrsync.database.base import Database
from gstrsync.domain.classifier import RowClassifier
from gstrsync.domain.entities import CanonicalRecord, ProcessedDocument
from gstrsync.domain.errors import (
    NotFoundError,
    ValidationError,
    document_not_found,
    import_not_found,
    no_rows_to_process,
)
from gstrsync.domain.lookups import PartyLookup, StateLookup
from gstrsync.domain.profiles import get_profile
from gstrsync.domain.views import merge_disallow, renumber
from gstrsync.utils.text import normalize_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationBatch:
    """Classified rows partitioned into the canonical set and its views."""

    canonical: tuple[CanonicalRecord, ...]
    reverse_charge: tuple[CanonicalRecord, ...]
    mismatched: tuple[CanonicalRecord, ...]
    itc_disallowed: tuple[CanonicalRecord, ...]


def dedupe_rows(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drop repeated (invoice number, GSTIN) pairs, keeping the first.

    Rows without an invoice number are always kept since their identity
    cannot be established.
    """
    seen: set[tuple[str, str]] = set()
    unique = []
    for row in rows:
        invoice = normalize_key(row.get("invoiceNumber"))
        if not invoice:
            unique.append(row)
            continue
        key = (invoice, normalize_key(row.get("gstin")))
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique


def classify_rows(
    rows: Iterable[dict[str, Any]], classifier: RowClassifier, start_index: int = 0
) -> ClassificationBatch:
    """Classify rows and partition them.

    Args:
        rows: Raw rows in import order
        classifier: Classifier configured for the rows' source profile
        start_index: First ``source_row_id`` to assign

    Returns:
        ClassificationBatch with every collection numbered 1..n
    """
    canonical = []
    reverse_charge = []
    mismatched = []
    for offset, row in enumerate(dedupe_rows(rows)):
        result = classifier.classify(row, start_index + offset)
        canonical.append(result.record)
        if result.record.is_reverse_charge:
            reverse_charge.append(result.record)
        if result.is_mismatched:
            mismatched.append(result.record)

    itc_disallowed = [row for row in canonical if row.itc_availability == "No"]
    return ClassificationBatch(
        canonical=renumber(canonical),
        reverse_charge=renumber(reverse_charge),
        mismatched=renumber(mismatched),
        itc_disallowed=renumber(itc_disallowed),
    )


class DocumentProcessor:
    """Service turning raw imports into processed documents."""

    def __init__(self, db: Database, state_lookup: Optional[StateLookup] = None):
        """Initialize document processor.

        Args:
            db: Database instance
            state_lookup: Shared state-code table; read from the database
                on first use when not supplied
        """
        self.db = db
        self._state_lookup = state_lookup

    @property
    def state_lookup(self) -> StateLookup:
        if self._state_lookup is None:
            self._state_lookup = StateLookup.from_database(self.db)
        return self._state_lookup

    def build_classifier(self, source_type, company_id: Optional[str]) -> RowClassifier:
        """Return a classifier for a source type and owning company."""
        return RowClassifier(
            profile=get_profile(source_type),
            state_lookup=self.state_lookup,
            party_lookup=PartyLookup.for_company(self.db, company_id),
        )

    def process(self, import_id: str) -> ProcessedDocument:
        """Classify every row of an import and store the processed document.

        Re-processing replaces the stored document. For sources whose profile
        merges disallow rows, previously stored disallow rows are kept and
        joined with the fresh candidates.

        Args:
            import_id: Raw import ID; also the processed document's ID

        Returns:
            The stored ProcessedDocument

        Raises:
            NotFoundError: If the import doesn't exist
            ValidationError: If the import has no rows
        """
        raw_import = self.db.get_import(import_id)
        if raw_import is None:
            raise NotFoundError(import_not_found(import_id))
        if not raw_import.rows:
            raise ValidationError(no_rows_to_process(import_id))

        profile = get_profile(raw_import.source_type)
        classifier = self.build_classifier(profile.source_type, raw_import.company_id)
        batch = classify_rows(raw_import.rows, classifier)

        def build(previous: Optional[ProcessedDocument]) -> ProcessedDocument:
            disallow = batch.itc_disallowed
            if profile.merge_disallow_on_process and previous is not None:
                disallow = merge_disallow(previous.disallow, batch.itc_disallowed)
            return ProcessedDocument(
                id=import_id,
                source_type=profile.source_type,
                company_id=raw_import.company_id,
                canonical=batch.canonical,
                reverse_charge=batch.reverse_charge,
                mismatched=batch.mismatched,
                disallow=disallow,
                processed_at=datetime.now(UTC),
            )

        document = self.db.replace_processed(import_id, build)
        logger.info(
            "Processed %s import %s: %d rows, %d reverse charge, %d mismatched, %d disallow",
            profile.label,
            import_id,
            len(document.canonical),
            len(document.reverse_charge),
            len(document.mismatched),
            len(document.disallow),
        )
        return document

    def get_processed(self, document_id: str) -> ProcessedDocument:
        """Get a processed document.

        Raises:
            NotFoundError: If no document is stored under the ID
        """
        document = self.db.get_processed(document_id)
        if document is None:
            raise NotFoundError(document_not_found(document_id))
        return document
