"""Relocation detection between a stored location and a new report."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from gatewaysync.domain.model import MovementStatus

if TYPE_CHECKING:
    from gatewaysync.domain.model import Coordinates

EARTH_RADIUS_KM: Final[float] = 6371.0
MOVEMENT_THRESHOLD_KM: Final[float] = 0.1


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle distance in kilometres on a spherical Earth."""

    phi1 = math.radians(origin.latitude)
    phi2 = math.radians(destination.latitude)
    d_phi = math.radians(destination.latitude - origin.latitude)
    d_lambda = math.radians(destination.longitude - origin.longitude)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


@dataclass(frozen=True, slots=True)
class MovementDetector:
    """Classify a candidate location against the last recorded one.

    A distance equal to the threshold does not count as a move.
    """

    threshold_km: float = MOVEMENT_THRESHOLD_KM

    def detect(self, prior: Coordinates | None, candidate: Coordinates) -> MovementStatus:
        if prior is None:
            return MovementStatus.NEW
        return self.classify_distance(haversine_km(prior, candidate))

    def classify_distance(self, distance_km: float) -> MovementStatus:
        if distance_km > self.threshold_km:
            return MovementStatus.MOVED
        return MovementStatus.NOT_MOVED
