"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested document, import or view rows do not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def import_not_found(import_id: str) -> str:
    """Return message for missing raw import."""
    return f"Import {import_id} not found"


def document_not_found(document_id: str) -> str:
    """Return message for missing processed document."""
    return f"Processed document {document_id} not found"


def no_rows_to_process(import_id: str) -> str:
    """Return message when an import carries no rows."""
    return f"No rows to process for import {import_id}"


def view_has_no_rows(document_id: str, view: str) -> str:
    """Return message when the targeted view is empty."""
    return f"No {view} rows found for document {document_id}"


def no_matching_rows(document_id: str, view: str) -> str:
    """Return message when no edit request resolves to a row."""
    return f"No matching rows in {view} view of document {document_id} for the given edits"


def empty_edit_payload() -> str:
    """Return message for an edit payload with no usable rows."""
    return "Edit payload is empty or carries no row keys"


def edit_missing_key(position: int) -> str:
    """Return message for an edit request carrying neither serial number nor index."""
    return f"Edit {position}: a serial number or index is required"


def no_manual_rows() -> str:
    """Return message for an append request without rows."""
    return "No manual rows provided"


def self_reconcile(document_id: str) -> str:
    """Return message for reconciling a document against itself."""
    return f"Document {document_id} cannot be reconciled against itself"


def field_not_editable(field: str, source_type: str) -> str:
    """Return message for an edit of a field the source profile locks."""
    return f"Field '{field}' is not editable on {source_type} documents"


def unknown_source_type(value: str) -> str:
    """Return message for an unrecognised source type."""
    return f"Unknown source type '{value}'"


def unknown_view(value: str) -> str:
    """Return message for an unrecognised view name."""
    return f"Unknown view '{value}'"


def duplicate_party(gstin: str, company_id: str) -> str:
    """Return message for a duplicate party master entry."""
    return f"Party with GSTIN '{gstin}' already exists for company {company_id}"


def party_not_found(party_id: int) -> str:
    """Return message for missing party master entry."""
    return f"Party {party_id} not found"


def no_parties_in_file(path: str) -> str:
    """Return message for a party file without usable rows."""
    return f"No parties with a name and GSTIN found in {path}"


def all_parties_duplicate(path: str) -> str:
    """Return message for a party file whose every GSTIN is already registered."""
    return f"All parties in {path} are duplicates; nothing to import"


def party_header_not_found(path: str) -> str:
    """Return message for a party file lacking the Particulars and GSTIN/UIN columns."""
    return f"No header row with 'Particulars' and 'GSTIN/UIN' columns in {path}"


def ledger_name_required() -> str:
    """Return message for a blank ledger name."""
    return "Ledger name is required"


def duplicate_ledger_name(name: str) -> str:
    """Return message for a ledger name that already exists."""
    return f"Ledger name '{name}' already exists"


def ledger_name_not_found(ledger_id: int) -> str:
    """Return message for missing ledger name."""
    return f"Ledger name {ledger_id} not found"
