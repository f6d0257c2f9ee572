"""Read-only lookup tables consumed during classification."""

from typing import Iterable, Optional

from gstrsync.database.base import Database
from gstrsync.domain.entities import Party, StateCode
from gstrsync.utils.text import normalize_key


class StateLookup:
    """GSTIN state-code prefix to state name.

    Built once and shared by every classification performed afterwards;
    rebuild it to pick up changes to the state-code table.
    """

    def __init__(self, entries: Iterable[StateCode]):
        self._states: dict[str, str] = {}
        for entry in entries:
            if entry.gst_code and entry.state_name:
                self._states[str(entry.gst_code).strip().zfill(2)] = entry.state_name

    @classmethod
    def from_database(cls, db: Database) -> "StateLookup":
        return cls(db.list_state_codes())

    def lookup(self, gstin_prefix: Optional[str]) -> Optional[str]:
        """Return the state for a two-character GSTIN prefix, if known."""
        if not gstin_prefix:
            return None
        return self._states.get(str(gstin_prefix).strip()[:2])

    def __len__(self) -> int:
        return len(self._states)


class PartyLookup:
    """Supplier GSTIN to party display name for one company."""

    def __init__(self, parties: Iterable[Party] = ()):
        self._names: dict[str, str] = {}
        for party in parties:
            key = normalize_key(party.gstin)
            if key and party.party_name:
                self._names[key] = party.party_name

    @classmethod
    def for_company(cls, db: Database, company_id: Optional[str]) -> "PartyLookup":
        if not company_id:
            return cls()
        return cls(db.list_parties(company_id))

    def lookup(self, gstin: Optional[str]) -> Optional[str]:
        """Return the party name registered for a GSTIN, if any."""
        key = normalize_key(gstin)
        if not key:
            return None
        return self._names.get(key)
