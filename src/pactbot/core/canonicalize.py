"""Record bytes shared by the database and the cache.

A record is serialized once, when it is created. The bytes go into
``doc_bytes`` and are copied unchanged into the cache, so a cache hit and a
database read return the same bytes.
"""

from __future__ import annotations

from typing import Any

import orjson
from pydantic import BaseModel

# Sorted keys and "Z" timestamps make the output stable for equal records
RECORD_JSON_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z | orjson.OPT_SORT_KEYS


def canonical_bytes(data: Any) -> bytes:
    """Encode plain JSON-compatible data (dicts, lists, datetimes) as record bytes."""
    return orjson.dumps(data, option=RECORD_JSON_OPTIONS)


def canonical_bytes_from_model(model: BaseModel) -> bytes:
    """Encode a record or analysis under its dashboard field names (``_id``, ``userId``)."""
    return canonical_bytes(model.model_dump(by_alias=True))
