"""Public domain model surface."""

from __future__ import annotations

from gatewaysync.domain.model.coordinates import SENTINEL, Coordinates
from gatewaysync.domain.model.enums import (
    CoordinateRejection,
    MovementStatus,
    ReconciliationOutcome,
    UpdateSource,
)
from gatewaysync.domain.model.gateway import Gateway, GatewayLocation, GatewayLocationForce
from gatewaysync.domain.model.update import (
    DEFAULT_NETWORK_ID,
    GatewayUpdate,
    datetime_to_nanoseconds,
    nanoseconds_to_datetime,
)

__all__ = [
    "DEFAULT_NETWORK_ID",
    "SENTINEL",
    "CoordinateRejection",
    "Coordinates",
    "Gateway",
    "GatewayLocation",
    "GatewayLocationForce",
    "GatewayUpdate",
    "MovementStatus",
    "ReconciliationOutcome",
    "UpdateSource",
    "datetime_to_nanoseconds",
    "nanoseconds_to_datetime",
]
