"""Owner-scoped contract records behind a cache-aside store."""

from pactbot.records.store import RecordStore

__all__ = ["RecordStore"]
