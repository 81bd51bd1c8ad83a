"""Plausibility rules for reported gateway coordinates.

Gateways frequently report coordinates that were never configured: the
origin written by unset GPS hardware, or a firmware default baked into a
specific model. Such pairs are classified as invalid and replaced with the
``(0, 0)`` sentinel by the reconciliation pipeline instead of dropping the
update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from gatewaysync.domain.model import CoordinateRejection, Coordinates

NULL_ISLAND_DEGREES: Final[float] = 1.0
MAX_LATITUDE: Final[float] = 90.0
MAX_LONGITUDE: Final[float] = 180.0

PLACEHOLDER_COORDINATES: Final[dict[Coordinates, str]] = {
    Coordinates(52.0, 6.0): "single channel gateway default",
    Coordinates(10.0, 20.0): "Lorier LR2 default",
    Coordinates(50.008724, 36.215805): "spoofed placeholder",
}


@dataclass(frozen=True, slots=True)
class CoordinateRules:
    """Tunable constants used by :func:`classify`."""

    null_island_degrees: float = NULL_ISLAND_DEGREES
    placeholders: dict[Coordinates, str] = field(
        default_factory=lambda: dict(PLACEHOLDER_COORDINATES)
    )


DEFAULT_RULES: Final[CoordinateRules] = CoordinateRules()


def classify(
    latitude: float,
    longitude: float,
    *,
    rules: CoordinateRules = DEFAULT_RULES,
) -> CoordinateRejection | None:
    """Return the first rule the pair violates, or ``None`` when plausible."""

    if abs(latitude) < rules.null_island_degrees and abs(longitude) < rules.null_island_degrees:
        return CoordinateRejection.NULL_ISLAND
    if abs(latitude) > MAX_LATITUDE:
        return CoordinateRejection.LATITUDE_OUT_OF_RANGE
    if abs(longitude) > MAX_LONGITUDE:
        return CoordinateRejection.LONGITUDE_OUT_OF_RANGE
    if Coordinates(latitude, longitude) in rules.placeholders:
        return CoordinateRejection.PLACEHOLDER
    return None


def is_valid(
    latitude: float,
    longitude: float,
    *,
    rules: CoordinateRules = DEFAULT_RULES,
) -> bool:
    return classify(latitude, longitude, rules=rules) is None


__all__ = [
    "DEFAULT_RULES",
    "PLACEHOLDER_COORDINATES",
    "CoordinateRules",
    "classify",
    "is_valid",
]
