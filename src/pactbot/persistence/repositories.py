"""Repository for contract records.

All reads return the stored canonical bytes so that a record served from the
database is byte-for-byte what the cache holds. Every lookup is scoped to
(id, owner).

Driver and ORM failures surface as ``StoreUnavailableError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pactbot.core.canonicalize import canonical_bytes_from_model
from pactbot.core.errors import StoreUnavailableError
from pactbot.core.model import ContractAnalysis, ContractRecord
from pactbot.persistence.tables import ContractAnalysisTable


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        raise StoreUnavailableError(operation) from e


class ContractRepository:
    """Repository for contract analysis records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_bytes(self, record_id: str, owner_id: str) -> bytes | None:
        """Get a record's canonical bytes, or None if (id, owner) has no match."""
        stmt = select(ContractAnalysisTable.doc_bytes).where(
            ContractAnalysisTable.id == record_id,
            ContractAnalysisTable.owner_id == owner_id,
        )
        with _store_errors("get"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def exists(self, record_id: str, owner_id: str) -> bool:
        """Check if a record exists for this owner."""
        stmt = select(ContractAnalysisTable.id).where(
            ContractAnalysisTable.id == record_id,
            ContractAnalysisTable.owner_id == owner_id,
        )
        with _store_errors("exists"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def list_bytes_for_owner(self, owner_id: str) -> list[bytes]:
        """All of an owner's records, newest first."""
        stmt = (
            select(ContractAnalysisTable.doc_bytes)
            .where(ContractAnalysisTable.owner_id == owner_id)
            .order_by(ContractAnalysisTable.created_at.desc())
        )
        with _store_errors("list"):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def create(
        self, owner_id: str, analysis: ContractAnalysis
    ) -> tuple[ContractRecord, bytes]:
        """Insert a new record for ``owner_id``.

        Assigns the id and timestamps, then stores the JSONB document and its
        canonical bytes.

        Returns:
            Tuple of (record, doc_bytes) for cache population.
        """
        now = datetime.now(UTC)
        record = ContractRecord(
            **analysis.model_dump(),
            id=uuid4().hex,
            user_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        doc_bytes = canonical_bytes_from_model(record)

        row = ContractAnalysisTable(
            id=record.id,
            owner_id=owner_id,
            contract_type=record.contract_type,
            doc=record.model_dump(by_alias=True, mode="json"),
            doc_bytes=doc_bytes,
            created_at=now,
            updated_at=now,
        )
        with _store_errors("create"):
            self.session.add(row)
            await self.session.flush()
        return (record, doc_bytes)

    async def delete(self, record_id: str, owner_id: str) -> bool:
        """Delete a record.

        Idempotent: deleting a row that is already gone is not an error.

        Returns:
            True if a row was deleted, False if there was nothing to delete.
        """
        stmt = delete(ContractAnalysisTable).where(
            ContractAnalysisTable.id == record_id,
            ContractAnalysisTable.owner_id == owner_id,
        )
        with _store_errors("delete"):
            result = await self.session.execute(stmt)
            await self.session.flush()
        return bool(result.rowcount)

    async def commit(self) -> None:
        """Commit the current transaction."""
        with _store_errors("commit"):
            await self.session.commit()
