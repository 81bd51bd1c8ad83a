"""Translate gateway-data records into normalized gateway updates."""

from __future__ import annotations

import math
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.model import (
    DEFAULT_NETWORK_ID,
    GatewayUpdate,
    UpdateSource,
    datetime_to_nanoseconds,
)

if TYPE_CHECKING:
    from .schema import WebGatewayDataResponse, WebGatewayStatus

log = getLogger(__name__)


def _altitude(value: float | None) -> int | None:
    if value is None or not math.isfinite(value):
        return None
    return int(value)


def parse_status(key: str, status: WebGatewayStatus) -> GatewayUpdate | None:
    """Return the update for one record, or ``None`` when it was never seen."""

    if status.last_seen is None:
        return None
    location = status.location
    return GatewayUpdate(
        network_id=DEFAULT_NETWORK_ID,
        gateway_id=status.id or key,
        time_ns=datetime_to_nanoseconds(status.last_seen),
        latitude=(location.latitude if location else None) or 0.0,
        longitude=(location.longitude if location else None) or 0.0,
        altitude=_altitude(location.altitude) if location else None,
        description=status.description,
        source=UpdateSource.WEB,
    )


def parse_listing(response: WebGatewayDataResponse) -> list[GatewayUpdate]:
    updates: list[GatewayUpdate] = []
    for key, status in response.root.items():
        update = parse_status(key, status)
        if update is None:
            log.debug("Skipping gateway-data record without last_seen: %s", key)
            continue
        updates.append(update)
    return updates
