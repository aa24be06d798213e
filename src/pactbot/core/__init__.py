"""Core domain models and serialization for contract records."""

from pactbot.core.canonicalize import canonical_bytes, canonical_bytes_from_model
from pactbot.core.model import (
    ContractAnalysis,
    ContractRecord,
    NegotiationPoint,
    OpportunityItem,
    RiskItem,
)

__all__ = [
    "ContractAnalysis",
    "ContractRecord",
    "NegotiationPoint",
    "OpportunityItem",
    "RiskItem",
    "canonical_bytes",
    "canonical_bytes_from_model",
]
