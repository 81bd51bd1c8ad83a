"""Normalized, source-independent gateway updates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Final

from gatewaysync.domain.model.coordinates import Coordinates
from gatewaysync.domain.model.enums import UpdateSource

DEFAULT_NETWORK_ID: Final[str] = "thethingsnetwork.org"

_NANOS_PER_SECOND: Final[int] = 1_000_000_000
_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)


def nanoseconds_to_datetime(value: int) -> datetime:
    """Convert epoch nanoseconds to an aware UTC datetime.

    Datetimes hold microseconds, so the sub-microsecond remainder is dropped.
    Event ordering uses the nanosecond value, never this datetime.
    """

    seconds, nanos = divmod(value, _NANOS_PER_SECOND)
    return _EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)


def datetime_to_nanoseconds(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value.astimezone(UTC) - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * _NANOS_PER_SECOND + delta.microseconds * 1000


@dataclass(frozen=True, slots=True, kw_only=True)
class GatewayUpdate:
    """One observation of a gateway, produced per inbound message.

    ``None`` marks an optional attribute the source did not report. A present
    zero (for example an altitude of 0 m) is a real value and is stored.
    """

    network_id: str = DEFAULT_NETWORK_ID
    gateway_id: str
    time_ns: int
    latitude: float
    longitude: float
    hardware_id: str | None = None
    description: str | None = None
    altitude: int | None = None
    location_accuracy: int | None = None
    location_source: str | None = None
    source: UpdateSource = UpdateSource.UPLINK

    @property
    def heard_at(self) -> datetime:
        return nanoseconds_to_datetime(self.time_ns)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)
