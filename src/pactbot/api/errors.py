"""Error responses for the PactBot API.

All errors share one envelope:

    {"messages": [{"code": ..., "messageType": ..., "text": ..., "timestamp": ...}]}

Domain errors from the record store are mapped here; a missing record never
reveals whether it exists under another owner.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pactbot.core.errors import RecordNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    """Type of message in error response."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    EXCEPTION = "Exception"


class Message(BaseModel):
    """Single error message."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    code: str
    message_type: MessageType = Field(alias="messageType")
    text: str
    timestamp: str | None = None


class Result(BaseModel):
    """Result wrapper for errors."""

    model_config = {"extra": "forbid"}

    messages: list[Message]


def _result(code: str, text: str, message_type: MessageType = MessageType.ERROR) -> Result:
    return Result(
        messages=[
            Message(
                code=code,
                messageType=message_type,
                text=text,
                timestamp=datetime.now(UTC).isoformat(),
            )
        ]
    )


class ApiError(HTTPException):
    """Base exception for API errors."""

    def __init__(
        self,
        status_code: int,
        code: str,
        text: str,
        message_type: MessageType = MessageType.ERROR,
    ):
        self.code = code
        self.text = text
        self.message_type = message_type
        super().__init__(status_code=status_code, detail=text)

    def to_result(self) -> Result:
        return _result(self.code, self.text, self.message_type)


class NotFoundError(ApiError):
    """Contract not found (404)."""

    def __init__(self) -> None:
        super().__init__(status_code=404, code="NotFound", text="Contract not found")


class UnauthorizedError(ApiError):
    """No authenticated user (401)."""

    def __init__(self) -> None:
        super().__init__(status_code=401, code="Unauthorized", text="Unauthorized")


class ServiceUnavailableError(ApiError):
    """Durable store unavailable (503)."""

    def __init__(self) -> None:
        super().__init__(
            status_code=503,
            code="ServiceUnavailable",
            text="Contract storage is temporarily unavailable",
            message_type=MessageType.EXCEPTION,
        )


async def api_exception_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Exception handler for API errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_result().model_dump(by_alias=True),
    )


async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    """Map a missing record to 404."""
    return await api_exception_handler(request, NotFoundError())


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Map a durable store failure to 503."""
    logger.error("Contract store failure during %s", exc.operation, exc_info=exc)
    return await api_exception_handler(request, ServiceUnavailableError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unexpected errors."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=_result(
            "InternalServerError", "An unexpected error occurred", MessageType.EXCEPTION
        ).model_dump(by_alias=True),
    )
