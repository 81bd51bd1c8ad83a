"""Durable gateway records.

These classes are plain dataclasses; the SQLAlchemy adapter maps them
imperatively onto the ``gateways``, ``gateway_locations`` and
``gateway_location_forces`` tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gatewaysync.domain.model.coordinates import Coordinates

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Gateway:
    """One row per physical gateway, keyed by ``(network_id, gateway_id)``.

    Every descriptive attribute is nullable so that a field absent from an
    update never overwrites a value learned from another source.
    ``last_heard_ns`` is the ordering key; ``last_heard`` is the same instant at
    datetime precision.
    """

    network_id: str
    gateway_id: str
    id: int | None = None
    hardware_id: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: int | None = None
    location_accuracy: int | None = None
    location_source: str | None = None
    last_heard: datetime | None = None
    last_heard_ns: int | None = None


@dataclass(eq=False, kw_only=True)
class GatewayLocation:
    """Append-only history entry; the newest ``installed_at`` is current."""

    network_id: str
    gateway_id: str
    installed_at: datetime
    latitude: float
    longitude: float
    id: int | None = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


@dataclass(eq=False, kw_only=True)
class GatewayLocationForce:
    """Administrator-asserted coordinates that override telemetry."""

    network_id: str
    gateway_id: str
    latitude: float
    longitude: float
    id: int | None = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)
