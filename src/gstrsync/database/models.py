"""SQLAlchemy models for gstrsync database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class RawImport(Base):
    """Raw rows of one uploaded filing export."""

    __tablename__ = "raw_imports"

    id = Column(String(36), primary_key=True)
    source_type = Column(String(2), nullable=False)
    company_id = Column(String, nullable=True, index=True)
    source_file_name = Column(String, nullable=True)
    rows = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class ProcessedFile(Base):
    """Processed document: canonical set and views stored as one payload."""

    __tablename__ = "processed_documents"

    id = Column(String(36), primary_key=True)
    source_type = Column(String(2), nullable=False)
    company_id = Column(String, nullable=True, index=True)
    payload = Column(JSON, nullable=False)
    processed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)
    reconciled_with = Column(String(36), nullable=True)


class StateCodeModel(Base):
    """GST state code model."""

    __tablename__ = "state_codes"

    gst_code = Column(String(2), primary_key=True)
    state_name = Column(String, nullable=False)


class PartyMaster(Base):
    """Party master model."""

    __tablename__ = "party_masters"

    id = Column(Integer, primary_key=True)
    company_id = Column(String, nullable=False)
    gstin = Column(String(15), nullable=False)
    party_name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Unique constraint on company_id + gstin
    __table_args__ = (UniqueConstraint("company_id", "gstin", name="uq_company_gstin"),)


class LedgerNameModel(Base):
    """Ledger name master model."""

    __tablename__ = "ledger_names"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
