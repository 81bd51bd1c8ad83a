"""Ports for fetching gateway statuses from external sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gatewaysync.domain.model import GatewayUpdate


@runtime_checkable
class GatewayStatusFetcher(Protocol):
    """Callable port returning the current status of every listed gateway."""

    name: str

    def __call__(self) -> list[GatewayUpdate]: ...


@runtime_checkable
class UpdateSink(Protocol):
    """Anything accepting normalized updates for reconciliation."""

    def submit(self, update: GatewayUpdate) -> None: ...


__all__ = ["GatewayStatusFetcher", "UpdateSink"]
