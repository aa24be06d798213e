"""Contract records API router.

Endpoints (owner taken from the session identity):
- POST   /api/contracts                 - Store an analysed contract
- GET    /api/contracts/user-contracts  - List the user's contracts, newest first
- GET    /api/contracts/contract/{id}   - Get one contract (cache-aside)
- DELETE /api/contracts/contract/{id}   - Delete one contract

A contract owned by someone else is reported as not found.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from pactbot.api.deps import CurrentUserId, Store
from pactbot.api.responses import json_bytes_response, json_data_response
from pactbot.core.canonicalize import canonical_bytes_from_model
from pactbot.core.model import ContractAnalysis

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])


@router.post("", status_code=201)
async def create_contract(
    analysis: ContractAnalysis,
    user_id: CurrentUserId,
    store: Store,
) -> Response:
    """Store the analysis of a contract for the current user."""
    record = await store.create(user_id, analysis)
    return json_bytes_response(canonical_bytes_from_model(record), status_code=201)


@router.get("/user-contracts")
async def get_user_contracts(user_id: CurrentUserId, store: Store) -> Response:
    """List the current user's contracts, newest first."""
    records = await store.list_for_owner(user_id)
    return json_data_response([record.model_dump(by_alias=True) for record in records])


@router.get("/contract/{contract_id}")
async def get_contract_by_id(contract_id: str, user_id: CurrentUserId, store: Store) -> Response:
    """Get a contract by id."""
    record = await store.fetch(contract_id, user_id)
    return json_bytes_response(canonical_bytes_from_model(record))


@router.delete("/contract/{contract_id}")
async def delete_contract(contract_id: str, user_id: CurrentUserId, store: Store) -> Response:
    """Delete a contract and evict it from the cache."""
    await store.delete(contract_id, user_id)
    return json_data_response({"message": "Contract deleted successfully"})
