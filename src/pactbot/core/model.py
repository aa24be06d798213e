"""Pydantic models for contract analysis records.

Field aliases follow the JSON the dashboard consumes (``_id``, ``userId``,
camelCase analysis fields). Models accept either the alias or the Python
attribute name on input.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Level = Literal["low", "medium", "high"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RiskItem(_CamelModel):
    """A risk identified in the contract."""

    description: str = Field(min_length=1)
    severity: Level = "medium"
    category: str = "general"


class OpportunityItem(_CamelModel):
    """An opportunity identified in the contract."""

    description: str = Field(min_length=1)
    impact: Level = "medium"
    category: str = "general"


class NegotiationPoint(_CamelModel):
    """A point the user may want to negotiate."""

    description: str = Field(min_length=1)
    priority: Level = "medium"
    category: str = "general"


class ContractAnalysis(_CamelModel):
    """Structured analysis produced upstream for one contract.

    This is the payload accepted on the write path; identity, owner and
    timestamps are assigned by the store.
    """

    contract_text: str = Field(alias="contractText", min_length=1)
    contract_type: str = Field(alias="contractType", min_length=1)
    summary: str = Field(min_length=1)
    risks: list[RiskItem] = Field(default_factory=list)
    opportunities: list[OpportunityItem] = Field(default_factory=list)
    negotiation_points: list[NegotiationPoint] = Field(
        default_factory=list, alias="negotiationPoints"
    )
    overall_score: float = Field(alias="overallScore", ge=0, le=100)
    language: str = "en"
    ai_model: str = Field(default="gemini-pro", alias="aiModel")


class ContractRecord(ContractAnalysis):
    """A stored contract analysis, scoped to its owner."""

    id: str = Field(alias="_id", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
