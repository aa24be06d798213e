from __future__ import annotations

from typing import Any

from fastapi import Response

from pactbot.core.canonicalize import canonical_bytes


def json_bytes_response(payload: bytes, status_code: int | None = None) -> Response:
    if status_code is None:
        return Response(content=payload, media_type="application/json")
    return Response(content=payload, media_type="application/json", status_code=status_code)


def json_data_response(data: Any, status_code: int | None = None) -> Response:
    return json_bytes_response(canonical_bytes(data), status_code)
