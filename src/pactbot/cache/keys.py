"""Cache key schema for contract records.

Key format: record:{record_id}

One key per record id. The owner is not part of the key; callers must check
the owner of a cached record before returning it.
"""

from __future__ import annotations


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    RECORD = "record"

    @classmethod
    def record(cls, record_id: str) -> str:
        """Key for a record's canonical bytes."""
        return f"{cls.RECORD}:{record_id}"
