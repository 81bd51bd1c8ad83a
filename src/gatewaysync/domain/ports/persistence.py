"""Ports for persisting gateway state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gatewaysync.domain.model import GatewayLocation, GatewayLocationForce

if TYPE_CHECKING:
    from gatewaysync.domain.model import Gateway


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class GatewayRepository(Protocol):
    """Persistence contract for the ``gateways`` relation."""

    def get(self, gateway_db_id: int) -> Gateway | None: ...

    def get_or_create_id(self, network_id: str, gateway_id: str) -> int:
        """Return the surrogate id, inserting the row when it does not exist.

        Must be safe under concurrent first sightings of the same identity.
        """
        ...

    def last_heard_ns(self, gateway_db_id: int) -> int | None: ...

    def update_last_heard(self, gateway_db_id: int, time_ns: int) -> None:
        """Record the event time in nanoseconds, plus its datetime for readers."""
        ...

    def update_details(
        self,
        gateway_db_id: int,
        *,
        hardware_id: str | None = None,
        description: str | None = None,
    ) -> None:
        """Write the given fields; ``None`` leaves the stored value untouched."""
        ...

    def update_location(
        self,
        gateway_db_id: int,
        *,
        latitude: float,
        longitude: float,
        altitude: int | None = None,
        location_accuracy: int | None = None,
        location_source: str | None = None,
    ) -> None:
        """Write coordinates and any present optional location attributes."""
        ...


@runtime_checkable
class GatewayLocationRepository(Repository[GatewayLocation], Protocol):
    """Persistence contract for the append-only location history."""

    def latest(self, network_id: str, gateway_id: str) -> GatewayLocation | None: ...


@runtime_checkable
class LocationForceRepository(Repository[GatewayLocationForce], Protocol):
    """Persistence contract for administrator coordinate overrides."""

    def find(self, network_id: str, gateway_id: str) -> GatewayLocationForce | None: ...
