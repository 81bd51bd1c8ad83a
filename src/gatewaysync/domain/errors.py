"""Error taxonomy for the reconciliation service."""

from __future__ import annotations


class GatewaySyncError(RuntimeError):
    """Base class for service errors."""


class StoreError(GatewaySyncError):
    """Raised when the durable store is unreachable or a query fails."""


class DecodeError(GatewaySyncError):
    """Raised when an inbound payload cannot be decoded into gateway updates."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source
