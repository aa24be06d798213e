"""SQLAlchemy ORM models for contract persistence.

Each record is stored both as JSONB (for queries) and as canonical bytes:
- doc: JSONB column holding the full record document
- doc_bytes: BYTEA column with canonical JSON, copied verbatim into the cache
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, LargeBinary, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ContractAnalysisTable(Base):
    """Contract analysis table.

    Rows are immutable after insert; a record is either read whole or deleted.
    """

    __tablename__ = "contract_analyses"

    # Opaque record id (uuid4 hex), exposed as "_id"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Owning user; every lookup is scoped to it
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)

    contract_type: Mapped[str] = mapped_column(Text, nullable=False)

    # Full record document (JSON on non-PostgreSQL backends)
    doc: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False
    )

    # Canonical JSON bytes served on reads and mirrored in the cache
    doc_bytes: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # Owner listing, newest first
        Index("idx_contract_analyses_owner_created", owner_id, created_at),
    )
