"""
Error types raised by the data store and the analytics services.
"""
from __future__ import annotations


class SalesEngineError(Exception):
    """Base class for sales engine errors."""


class RowError(SalesEngineError, ValueError):
    """A source row could not be turned into an entity."""

    def __init__(self, collection: str, row_id, reason: str) -> None:
        self.collection = collection
        self.row_id = row_id
        self.reason = reason
        super().__init__(f"{collection} row {row_id!r}: {reason}")


class InsufficientSampleError(SalesEngineError, ValueError):
    """A statistic was requested over too few observations."""

    def __init__(self, statistic: str, size: int, required: int) -> None:
        self.statistic = statistic
        self.size = size
        self.required = required
        super().__init__(
            f"{statistic} needs at least {required} observation(s), got {size}"
        )
