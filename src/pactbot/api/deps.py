"""Shared FastAPI dependencies for PactBot routers.

Provides:
- The current user's id, as attached by the upstream session authenticator
- The record cache built at startup
- A request-scoped record store
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pactbot.api.errors import UnauthorizedError
from pactbot.cache.redis import RecordCache
from pactbot.config import settings
from pactbot.observability.logging import user_id_var
from pactbot.persistence.db import get_session
from pactbot.persistence.repositories import ContractRepository
from pactbot.records.store import RecordStore


async def get_current_user_id(request: Request) -> str:
    """Resolve the owner identity for this request.

    The session layer in front of this service sets ``request.state.user_id``.
    A forwarded header is read only when ``USER_ID_HEADER`` names one, for
    deployments behind a proxy that strips it from client requests.

    Raises:
        UnauthorizedError: If no identity is attached.
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id and settings.user_id_header:
        user_id = request.headers.get(settings.user_id_header)
    if not user_id:
        raise UnauthorizedError()
    user_id_var.set(user_id)
    return user_id


def get_cache(request: Request) -> RecordCache:
    """Get the record cache attached to the application at startup."""
    cache: RecordCache | None = getattr(request.app.state, "cache", None)
    if cache is None:
        return RecordCache(None)
    return cache


async def get_record_store(
    session: AsyncSession = Depends(get_session),
    cache: RecordCache = Depends(get_cache),
) -> RecordStore:
    """Get a record store bound to this request's session."""
    return RecordStore(ContractRepository(session), cache)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
Store = Annotated[RecordStore, Depends(get_record_store)]
