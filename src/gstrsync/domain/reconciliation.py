"""Cross-document reconciliation by invoice number."""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from gstrsync.database.base import Database
from gstrsync.domain.entities import CanonicalRecord, ProcessedDocument, ReconciliationResult
from gstrsync.domain.errors import (
    NotFoundError,
    ValidationError,
    document_not_found,
    self_reconcile,
)
from gstrsync.domain.views import renumber
from gstrsync.utils.text import normalize_key

logger = logging.getLogger(__name__)


def invoice_numbers(rows: Iterable[CanonicalRecord]) -> set[str]:
    """Return the normalised, non-blank invoice numbers of the rows."""
    return {key for key in (normalize_key(row.invoice_number) for row in rows) if key}


def exclude_invoices(
    rows: Iterable[CanonicalRecord], excluded: set[str]
) -> tuple[CanonicalRecord, ...]:
    """Drop rows whose invoice number is excluded; rows without one stay."""
    return renumber(
        row
        for row in rows
        if not normalize_key(row.invoice_number)
        or normalize_key(row.invoice_number) not in excluded
    )


class Reconciler:
    """Service removing invoices already captured from the sibling filing."""

    def __init__(self, db: Database):
        """Initialize reconciler.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(self, document_id: str, other_id: str) -> ReconciliationResult:
        """Remove from one document every invoice present in another.

        Rows are removed from the canonical set and from all three views, and
        each collection is renumbered. When the other document carries no
        invoice numbers nothing is written.

        Args:
            document_id: Document being reconciled
            other_id: Already processed document of the sibling source

        Returns:
            ReconciliationResult with the resulting document and counts

        Raises:
            NotFoundError: If either document doesn't exist
            ValidationError: If a document is reconciled against itself
        """
        if document_id == other_id:
            raise ValidationError(self_reconcile(document_id))

        other = self.db.get_processed(other_id)
        if other is None:
            raise NotFoundError(document_not_found(other_id))

        excluded = invoice_numbers(other.canonical)
        removed = 0

        def mutate(document: ProcessedDocument) -> Optional[ProcessedDocument]:
            nonlocal removed
            if not excluded:
                return None
            canonical = exclude_invoices(document.canonical, excluded)
            removed = len(document.canonical) - len(canonical)
            return replace(
                document,
                canonical=canonical,
                reverse_charge=exclude_invoices(document.reverse_charge, excluded),
                mismatched=exclude_invoices(document.mismatched, excluded),
                disallow=exclude_invoices(document.disallow, excluded),
                reconciled_with=other_id,
            )

        document = self.db.mutate_processed(document_id, mutate)
        if document is None:
            raise NotFoundError(document_not_found(document_id))

        if not excluded:
            logger.info("Document %s contributes no invoice numbers; nothing to reconcile", other_id)
        else:
            logger.info(
                "Reconciled document %s against %s: removed %d rows",
                document_id,
                other_id,
                removed,
            )
        return ReconciliationResult(
            document=document, removed=removed, invoice_numbers=len(excluded)
        )
