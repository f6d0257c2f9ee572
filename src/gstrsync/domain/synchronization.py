"""Ledger-field edits against one view, propagated to every other view.

An edit call runs as a single read-modify-write of the stored document:

1. edits are applied to the rows of the targeted view, matched by the view's
   own serial numbers (or, failing that, by position);
2. the fields of every modified row are copied into the canonical set by
   ``source_row_id``;
3. the canonical set is renumbered, the reverse-charge and mismatched views
   are re-projected over their fixed membership, and the disallow view is
   rebuilt from the canonical set.

Edits that change nothing leave the stored document untouched.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Sequence

from gstrsync.database.base import Database
from gstrsync.domain.entities import (
    CanonicalRecord,
    EditRequest,
    ProcessedDocument,
    ViewName,
)
from gstrsync.domain.errors import (
    NotFoundError,
    ValidationError,
    document_not_found,
    edit_missing_key,
    empty_edit_payload,
    field_not_editable,
    no_manual_rows,
    no_matching_rows,
    unknown_view,
    view_has_no_rows,
)
from gstrsync.domain.lookups import StateLookup
from gstrsync.domain.processing import DocumentProcessor, classify_rows, dedupe_rows
from gstrsync.domain.profiles import get_profile
from gstrsync.domain.views import derive_disallow, project_fixed_view, renumber
from gstrsync.utils.text import clean_string, normalize_yes_no

logger = logging.getLogger(__name__)

ACTIONS = {"accept": "Accept", "reject": "Reject", "pending": "Pending"}

# Fields only some source profiles allow a reviewer to change
SUPPLIER_FIELDS = ("itc_availability", "supplier_name")

# Ledger fields a manually entered row may carry from the reviewer
MANUAL_FIELDS = ("ledger_name", "accept_credit", "action", "action_reason", "narration")


def parse_view_name(value: "str | ViewName") -> ViewName:
    """Resolve a view name such as "reverse-charge" or "reverse_charge"."""
    if isinstance(value, ViewName):
        return value
    normalized = str(value).strip().lower().replace("_", "-")
    try:
        return ViewName(normalized)
    except ValueError:
        raise ValidationError(unknown_view(str(value)))


def normalize_edit_value(field_name: str, value: Any) -> Optional[str]:
    """Normalise a submitted value for one editable field.

    Yes/no fields accept yes/y/no/n, the action accepts accept/reject/pending
    in any case; unrecognised values clear the field. Free-text fields are
    trimmed with blank meaning cleared.
    """
    if value is None:
        return None
    if field_name in ("accept_credit", "itc_availability"):
        return normalize_yes_no(value)
    if field_name == "action":
        text = clean_string(value)
        return ACTIONS.get(text.lower()) if text else None
    return clean_string(value)


def normalize_edit(edit: EditRequest) -> dict[str, Optional[str]]:
    """Return the normalised values of the fields an edit supplies."""
    return {
        name: normalize_edit_value(name, value)
        for name, value in edit.supplied_fields().items()
    }


@dataclass(frozen=True)
class RowChange:
    """Fields written to one row, keyed by its stable identity."""

    source_row_id: int
    fields: dict[str, Optional[str]]


def apply_edits(
    rows: Sequence[CanonicalRecord], edits: Iterable[EditRequest]
) -> tuple[tuple[CanonicalRecord, ...], list[RowChange], int]:
    """Apply edits to the rows of one view.

    An edit with a serial number is matched only against ``serial_no``; an
    edit without one falls back to the row's position in ``rows``. When two
    edits address the same key the later one wins.

    Returns:
        (updated rows, changes for rows actually modified, number of rows
        matched by any edit)
    """
    by_serial: dict[int, dict[str, Optional[str]]] = {}
    by_index: dict[int, dict[str, Optional[str]]] = {}
    for edit in edits:
        values = normalize_edit(edit)
        if not values:
            continue
        if edit.serial_no is not None:
            by_serial[edit.serial_no] = values
        elif edit.index is not None:
            by_index[edit.index] = values

    updated = []
    changes: list[RowChange] = []
    matched = 0
    for position, row in enumerate(rows):
        if row.serial_no in by_serial:
            values = by_serial[row.serial_no]
        elif position in by_index:
            values = by_index[position]
        else:
            updated.append(row)
            continue

        matched += 1
        differing = {
            name: value for name, value in values.items() if getattr(row, name) != value
        }
        if not differing:
            updated.append(row)
            continue
        updated.append(replace(row, **differing))
        changes.append(RowChange(source_row_id=row.source_row_id, fields=values))

    return tuple(updated), changes, matched


def propagate_changes(
    canonical: Sequence[CanonicalRecord], changes: Iterable[RowChange]
) -> tuple[CanonicalRecord, ...]:
    """Overwrite the changed fields of canonical rows joined on source_row_id."""
    rows = list(canonical)
    positions = {row.source_row_id: position for position, row in enumerate(rows)}
    for change in changes:
        position = positions.get(change.source_row_id)
        if position is None:
            continue
        current = rows[position]
        differing = {
            name: value
            for name, value in change.fields.items()
            if getattr(current, name) != value
        }
        if differing:
            rows[position] = replace(current, **differing)
    return tuple(rows)


def resync_views(
    document: ProcessedDocument,
    canonical: Iterable[CanonicalRecord],
    reverse_charge: Optional[Iterable[CanonicalRecord]] = None,
    mismatched: Optional[Iterable[CanonicalRecord]] = None,
) -> ProcessedDocument:
    """Renumber the canonical set and re-derive every view from it.

    ``reverse_charge``/``mismatched`` override the document's stored view
    rows as the membership base, used when a view was just edited.
    """
    canonical = renumber(canonical)
    return replace(
        document,
        canonical=canonical,
        reverse_charge=project_fixed_view(
            canonical, document.reverse_charge if reverse_charge is None else reverse_charge
        ),
        mismatched=project_fixed_view(
            canonical, document.mismatched if mismatched is None else mismatched
        ),
        disallow=derive_disallow(canonical),
    )


class ViewSynchronizer:
    """Service applying reviewer edits and manual rows to processed documents."""

    def __init__(self, db: Database, state_lookup: Optional[StateLookup] = None):
        """Initialize view synchronizer.

        Args:
            db: Database instance
            state_lookup: Shared state-code table used to classify appended rows
        """
        self.db = db
        self.processor = DocumentProcessor(db, state_lookup=state_lookup)

    def _check_editable(self, document_id: str, edits: Sequence[EditRequest]) -> None:
        document = self.db.get_processed(document_id)
        if document is None:
            raise NotFoundError(document_not_found(document_id))
        profile = get_profile(document.source_type)
        if profile.supplier_fields_editable:
            return
        for edit in edits:
            for name in SUPPLIER_FIELDS:
                if name in edit.supplied_fields():
                    raise ValidationError(field_not_editable(name, profile.label))

    def update_ledger_fields(
        self,
        document_id: str,
        view: "str | ViewName",
        edits: Sequence[EditRequest],
    ) -> ProcessedDocument:
        """Apply ledger-field edits addressed to one view.

        Args:
            document_id: Processed document ID
            view: Targeted view; serial numbers are read in its numbering
            edits: Edit requests, each keyed by serial number or index

        Returns:
            The updated document, or the stored document unchanged when the
            edits change nothing

        Raises:
            NotFoundError: If the document doesn't exist or the view is empty
            ValidationError: If no edit carries a key, an edit touches a field
                the source locks, or no edit resolves to a row
        """
        view_name = parse_view_name(view)
        keyed = []
        for position, edit in enumerate(edits, start=1):
            if edit.serial_no is None and edit.index is None:
                logger.warning(edit_missing_key(position))
                continue
            keyed.append(edit)
        if not keyed:
            raise ValidationError(empty_edit_payload())

        self._check_editable(document_id, keyed)

        def mutate(document: ProcessedDocument) -> Optional[ProcessedDocument]:
            if view_name is ViewName.DISALLOW:
                target_rows = derive_disallow(document.canonical)
            else:
                target_rows = document.view(view_name)
            if not target_rows:
                logger.warning(view_has_no_rows(document_id, view_name.value))
                raise NotFoundError(view_has_no_rows(document_id, view_name.value))

            edited_rows, changes, matched = apply_edits(target_rows, keyed)
            if not matched:
                logger.warning(no_matching_rows(document_id, view_name.value))
                raise ValidationError(no_matching_rows(document_id, view_name.value))
            if not changes:
                logger.debug("Edits to %s view of %s changed nothing", view_name.value, document_id)
                return None

            if view_name is ViewName.CANONICAL:
                canonical = edited_rows
            else:
                canonical = propagate_changes(document.canonical, changes)

            overrides = {}
            if view_name is ViewName.REVERSE_CHARGE:
                overrides["reverse_charge"] = edited_rows
            elif view_name is ViewName.MISMATCHED:
                overrides["mismatched"] = edited_rows

            logger.info(
                "Updated %d rows via %s view of document %s",
                len(changes),
                view_name.value,
                document_id,
            )
            return resync_views(document, canonical, **overrides)

        updated = self.db.mutate_processed(document_id, mutate)
        if updated is None:
            raise NotFoundError(document_not_found(document_id))
        return updated

    def append_rows(
        self, document_id: str, raw_rows: Sequence[dict[str, Any]]
    ) -> ProcessedDocument:
        """Classify manually entered rows and append them to the canonical set.

        New rows continue the document's ``source_row_id`` sequence and keep
        any ledger fields entered with them. Reverse-charge and mismatched
        membership is left as fixed at processing time; the disallow view is
        rebuilt.

        Raises:
            NotFoundError: If the document doesn't exist
            ValidationError: If no non-blank rows are supplied
        """
        rows = [
            row
            for row in raw_rows
            if row and any(clean_string(value) is not None for value in row.values())
        ]
        if not rows:
            raise ValidationError(no_manual_rows())

        existing = self.db.get_processed(document_id)
        if existing is None:
            raise NotFoundError(document_not_found(document_id))
        classifier = self.processor.build_classifier(existing.source_type, existing.company_id)

        def mutate(document: ProcessedDocument) -> ProcessedDocument:
            start_index = max((row.source_row_id for row in document.canonical), default=-1) + 1
            batch = classify_rows(rows, classifier, start_index=start_index)
            manual = []
            for record, row in zip(batch.canonical, dedupe_rows(rows)):
                values = {
                    name: value
                    for name, value in normalize_edit(EditRequest.from_mapping(row)).items()
                    if name in MANUAL_FIELDS
                }
                manual.append(replace(record, is_manual=True, **values))
            logger.info("Appended %d manual rows to document %s", len(manual), document_id)
            return resync_views(document, (*document.canonical, *manual))

        updated = self.db.mutate_processed(document_id, mutate)
        if updated is None:
            raise NotFoundError(document_not_found(document_id))
        return updated

