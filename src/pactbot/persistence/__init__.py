"""Persistence layer for contract records (PostgreSQL via SQLAlchemy asyncio)."""

from pactbot.persistence.repositories import ContractRepository
from pactbot.persistence.tables import Base, ContractAnalysisTable

__all__ = [
    "Base",
    "ContractAnalysisTable",
    "ContractRepository",
]
