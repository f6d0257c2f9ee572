"""Domain layer for gstrsync.

Services are imported from their own modules (``gstrsync.domain.processing``
and so on); only entities and errors are re-exported here because the
database layer imports them while it is itself being imported.
"""

from gstrsync.domain.entities import (
    CanonicalRecord,
    EditRequest,
    ProcessedDocument,
    RawImport,
    SourceType,
    ViewName,
)
from gstrsync.domain.errors import ConflictError, DomainError, NotFoundError, ValidationError

__all__ = [
    "CanonicalRecord",
    "EditRequest",
    "ProcessedDocument",
    "RawImport",
    "SourceType",
    "ViewName",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
]
