"""Administrator coordinate overrides."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gatewaysync.domain.model import Coordinates
    from gatewaysync.domain.ports.persistence import LocationForceRepository


def find_force(
    repository: LocationForceRepository,
    network_id: str,
    gateway_id: str,
) -> Coordinates | None:
    """Return the forced coordinates for a gateway, if an override exists."""

    force = repository.find(network_id, gateway_id)
    if force is None:
        return None
    return force.coordinates
