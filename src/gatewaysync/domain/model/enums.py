"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class UpdateSource(StrEnum):
    """Where a gateway update was observed."""

    UPLINK = "uplink"
    NOC = "noc"
    WEB = "web"


class MovementStatus(StrEnum):
    NEW = "new"
    MOVED = "moved"
    NOT_MOVED = "not_moved"


class ReconciliationOutcome(StrEnum):
    """Result of running one update through the reconciliation pipeline."""

    STALE = "stale"
    NEW = "new"
    MOVED = "moved"
    NOT_MOVED = "not_moved"

    @classmethod
    def from_movement(cls, status: MovementStatus) -> ReconciliationOutcome:
        return cls(status.value)


class CoordinateRejection(StrEnum):
    """Why a coordinate pair was classified as implausible."""

    NULL_ISLAND = "null_island"
    LATITUDE_OUT_OF_RANGE = "latitude_out_of_range"
    LONGITUDE_OUT_OF_RANGE = "longitude_out_of_range"
    PLACEHOLDER = "placeholder"
