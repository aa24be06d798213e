"""Domain errors raised by the record store.

The API layer maps these to HTTP responses; see ``pactbot.api.errors``.
"""

from __future__ import annotations


class RecordNotFoundError(Exception):
    """No record matches (id, owner).

    Raised both when the id does not exist and when it belongs to another
    owner; the two cases are indistinguishable.
    """

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__("Contract not found")


class StoreUnavailableError(Exception):
    """The durable store could not be reached or rejected the operation."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Contract store unavailable during {operation}")
