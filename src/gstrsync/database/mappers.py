"""Mapper functions to convert between domain models and SQLAlchemy models.

Records are stored inside a document's JSON payload, so this layer also
owns the record <-> plain dict conversion. Amounts are written as strings
to keep their exact decimal value.
"""

from dataclasses import fields
from decimal import Decimal
from typing import Any, Optional

from gstrsync.domain import entities as domain
from gstrsync.database.models import (
    LedgerNameModel as ORMLedgerName,
    PartyMaster as ORMPartyMaster,
    ProcessedFile as ORMProcessedFile,
    RawImport as ORMRawImport,
    StateCodeModel as ORMStateCode,
)

AMOUNT_FIELDS = {
    "invoice_value",
    "taxable_value",
    "igst",
    "cgst",
    "sgst",
    "cess",
    "gro_amount",
    "round_off_dr",
    "round_off_cr",
    "invoice_amount",
    "supplier_amount",
}

LEDGER_AMOUNT_FIELDS = ("ledger_amount", "igst", "cgst", "sgst")

VIEW_KEYS = ("canonical", "reverse_charge", "mismatched", "disallow")


def _dump_amount(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _load_amount(value: Any) -> Optional[Decimal]:
    return None if value is None else Decimal(str(value))


def ledger_to_dict(ledger: domain.SlabLedger) -> dict[str, Any]:
    """Convert a SlabLedger to a JSON-ready dict."""
    data: dict[str, Any] = {name: _dump_amount(getattr(ledger, name)) for name in LEDGER_AMOUNT_FIELDS}
    data["dr_cr"] = ledger.dr_cr
    return data


def ledger_from_dict(data: dict[str, Any]) -> domain.SlabLedger:
    """Convert a stored dict to a SlabLedger."""
    return domain.SlabLedger(
        ledger_amount=_load_amount(data.get("ledger_amount")),
        dr_cr=data.get("dr_cr"),
        igst=_load_amount(data.get("igst")),
        cgst=_load_amount(data.get("cgst")),
        sgst=_load_amount(data.get("sgst")),
    )


def record_to_dict(record: domain.CanonicalRecord) -> dict[str, Any]:
    """Convert a CanonicalRecord to a JSON-ready dict."""
    data: dict[str, Any] = {}
    for item in fields(record):
        value = getattr(record, item.name)
        if item.name == "ledgers":
            value = {slab: ledger_to_dict(ledger) for slab, ledger in value.items()}
        elif item.name in AMOUNT_FIELDS:
            value = _dump_amount(value)
        data[item.name] = value
    return data


def record_from_dict(data: dict[str, Any]) -> domain.CanonicalRecord:
    """Convert a stored dict to a CanonicalRecord.

    Unknown keys are ignored and missing ones take the entity defaults.
    """
    known = {item.name for item in fields(domain.CanonicalRecord)}
    values: dict[str, Any] = {}
    for name, value in data.items():
        if name not in known:
            continue
        if name == "ledgers":
            ledgers = domain.empty_ledgers()
            ledgers.update({slab: ledger_from_dict(item) for slab, item in (value or {}).items()})
            value = ledgers
        elif name in AMOUNT_FIELDS:
            value = _load_amount(value)
        values[name] = value
    return domain.CanonicalRecord(**values)


def document_payload(document: domain.ProcessedDocument) -> dict[str, list[dict[str, Any]]]:
    """Build the JSON payload holding the canonical set and the three views."""
    return {key: [record_to_dict(row) for row in getattr(document, key)] for key in VIEW_KEYS}


def document_to_domain(orm_document: ORMProcessedFile) -> domain.ProcessedDocument:
    """Convert SQLAlchemy ProcessedFile model to domain ProcessedDocument entity."""
    payload = orm_document.payload or {}
    return domain.ProcessedDocument(
        id=orm_document.id,
        source_type=domain.SourceType(orm_document.source_type),
        company_id=orm_document.company_id,
        processed_at=orm_document.processed_at,
        updated_at=orm_document.updated_at,
        reconciled_with=orm_document.reconciled_with,
        **{
            key: tuple(record_from_dict(row) for row in payload.get(key, ()))
            for key in VIEW_KEYS
        },
    )


def raw_import_to_domain(orm_import: ORMRawImport) -> domain.RawImport:
    """Convert SQLAlchemy RawImport model to domain RawImport entity."""
    return domain.RawImport(
        id=orm_import.id,
        source_type=domain.SourceType(orm_import.source_type),
        company_id=orm_import.company_id,
        rows=tuple(orm_import.rows or ()),
        source_file_name=orm_import.source_file_name,
        created_at=orm_import.created_at,
    )


def state_code_to_domain(orm_state: ORMStateCode) -> domain.StateCode:
    """Convert SQLAlchemy StateCodeModel to domain StateCode entity."""
    return domain.StateCode(gst_code=orm_state.gst_code, state_name=orm_state.state_name)


def party_to_domain(orm_party: ORMPartyMaster) -> domain.Party:
    """Convert SQLAlchemy PartyMaster model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        company_id=orm_party.company_id,
        gstin=orm_party.gstin,
        party_name=orm_party.party_name,
        created_at=orm_party.created_at,
    )


def ledger_name_to_domain(orm_ledger: ORMLedgerName) -> domain.LedgerName:
    """Convert SQLAlchemy LedgerNameModel to domain LedgerName entity."""
    return domain.LedgerName(
        id=orm_ledger.id,
        name=orm_ledger.name,
        created_at=orm_ledger.created_at,
    )


def json_safe_row(row: dict[str, Any]) -> dict[str, Any]:
    """Return a raw row with values JSON can store; non-scalars become strings."""
    safe: dict[str, Any] = {}
    for key, value in row.items():
        if value is None or isinstance(value, (str, int, float, bool)):
            safe[str(key)] = value
        else:
            safe[str(key)] = str(value)
    return safe
