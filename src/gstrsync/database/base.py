"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from gstrsync.domain.entities import (
    LedgerName,
    Party,
    ProcessedDocument,
    RawImport,
    StateCode,
)

DocumentMutator = Callable[[ProcessedDocument], Optional[ProcessedDocument]]
DocumentBuilder = Callable[[Optional[ProcessedDocument]], ProcessedDocument]


class Database(ABC):
    """Abstract database interface for gstrsync."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Raw import operations
    @abstractmethod
    def create_import(self, raw_import: RawImport) -> None:
        """Store a raw import under its ID."""
        pass

    @abstractmethod
    def get_import(self, import_id: str) -> Optional[RawImport]:
        """Get raw import by ID."""
        pass

    @abstractmethod
    def list_imports(self, company_id: Optional[str] = None) -> list[RawImport]:
        """List raw imports, newest first."""
        pass

    @abstractmethod
    def delete_import(self, import_id: str) -> None:
        """Delete a raw import. Missing IDs are ignored."""
        pass

    # Processed document operations
    @abstractmethod
    def get_processed(self, document_id: str) -> Optional[ProcessedDocument]:
        """Get processed document by ID."""
        pass

    @abstractmethod
    def replace_processed(self, document_id: str, builder: DocumentBuilder) -> ProcessedDocument:
        """Build and store a document, replacing any stored one.

        ``builder`` receives the currently stored document (or None) and runs
        inside the exclusive section for the processed-document collection.
        """
        pass

    @abstractmethod
    def mutate_processed(
        self, document_id: str, mutator: DocumentMutator
    ) -> Optional[ProcessedDocument]:
        """Read-modify-write a stored document as one exclusive unit.

        Returns None when no document is stored under the ID. A mutator
        returning None skips the write and the stored document is returned
        unchanged; a mutator raising leaves the stored document untouched and
        the exception propagates.
        """
        pass

    @abstractmethod
    def delete_processed(self, document_id: str) -> None:
        """Delete a processed document. Missing IDs are ignored."""
        pass

    # State code operations
    @abstractmethod
    def list_state_codes(self) -> list[StateCode]:
        """List state codes ordered by code."""
        pass

    @abstractmethod
    def add_state_codes(self, codes: list[StateCode]) -> None:
        """Insert or overwrite state codes."""
        pass

    @abstractmethod
    def clear_state_codes(self) -> None:
        """Delete every state code."""
        pass

    # Party master operations
    @abstractmethod
    def create_party(self, company_id: str, gstin: str, party_name: str) -> Party:
        """Create a party master entry."""
        pass

    @abstractmethod
    def create_parties(self, company_id: str, entries: list[tuple[str, str]]) -> list[Party]:
        """Create several party master entries from (gstin, party_name) pairs in one transaction."""
        pass

    @abstractmethod
    def get_party(self, party_id: int) -> Optional[Party]:
        """Get party by ID."""
        pass

    @abstractmethod
    def get_party_by_gstin(self, company_id: str, gstin: str) -> Optional[Party]:
        """Get a company's party by GSTIN."""
        pass

    @abstractmethod
    def list_parties(self, company_id: str) -> list[Party]:
        """List a company's parties ordered by name."""
        pass

    @abstractmethod
    def delete_party(self, party_id: int) -> None:
        """Delete a party master entry."""
        pass

    @abstractmethod
    def update_party(
        self,
        party_id: int,
        gstin: Optional[str] = None,
        party_name: Optional[str] = None,
    ) -> Party:
        """Update a party master entry. None fields are left unchanged."""
        pass

    # Ledger name operations
    @abstractmethod
    def list_ledger_names(self) -> list[LedgerName]:
        """List ledger names ordered case-insensitively."""
        pass

    @abstractmethod
    def get_ledger_name(self, ledger_id: int) -> Optional[LedgerName]:
        """Get ledger name by ID."""
        pass

    @abstractmethod
    def create_ledger_names(self, names: list[str]) -> list[LedgerName]:
        """Create ledger names in one transaction."""
        pass

    @abstractmethod
    def rename_ledger_name(self, ledger_id: int, name: str) -> LedgerName:
        """Rename a ledger name."""
        pass

    @abstractmethod
    def delete_ledger_name(self, ledger_id: int) -> None:
        """Delete a ledger name."""
        pass
