"""Tunables of the reconciliation rules."""

from __future__ import annotations

from dataclasses import dataclass

from gatewaysync.domain.coordinates import NULL_ISLAND_DEGREES, CoordinateRules
from gatewaysync.domain.movement import MOVEMENT_THRESHOLD_KM, MovementDetector

from .env import env_float
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    movement_threshold_km: float = MOVEMENT_THRESHOLD_KM
    null_island_degrees: float = NULL_ISLAND_DEGREES

    def __post_init__(self) -> None:
        if self.movement_threshold_km < 0:
            raise ConfigurationError("Movement threshold must not be negative")
        if self.null_island_degrees < 0:
            raise ConfigurationError("Null island box must not be negative")

    def movement_detector(self) -> MovementDetector:
        return MovementDetector(threshold_km=self.movement_threshold_km)

    def coordinate_rules(self) -> CoordinateRules:
        return CoordinateRules(null_island_degrees=self.null_island_degrees)


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        movement_threshold_km=env_float("MOVEMENT_THRESHOLD_KM", MOVEMENT_THRESHOLD_KM),
        null_island_degrees=env_float("NULL_ISLAND_DEGREES", NULL_ISLAND_DEGREES),
    )
