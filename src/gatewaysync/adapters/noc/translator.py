"""Translate NOC status records into normalized gateway updates."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.domain.model import (
    DEFAULT_NETWORK_ID,
    GatewayUpdate,
    UpdateSource,
    datetime_to_nanoseconds,
)

if TYPE_CHECKING:
    from .schema import NocGatewayStatus, NocStatusesResponse

log = getLogger(__name__)


def parse_status(gateway_id: str, status: NocGatewayStatus) -> GatewayUpdate | None:
    """Return the update for one record, or ``None`` when it has no timestamp.

    Altitude and description are not taken from this source.
    """

    if not status.has_timestamp or status.timestamp is None:
        return None
    location = status.location
    return GatewayUpdate(
        network_id=DEFAULT_NETWORK_ID,
        gateway_id=gateway_id,
        time_ns=datetime_to_nanoseconds(status.timestamp),
        latitude=(location.latitude if location else None) or 0.0,
        longitude=(location.longitude if location else None) or 0.0,
        source=UpdateSource.NOC,
    )


def parse_statuses(response: NocStatusesResponse) -> list[GatewayUpdate]:
    updates: list[GatewayUpdate] = []
    for gateway_id, status in response.statuses.items():
        update = parse_status(gateway_id, status)
        if update is None:
            log.debug("Skipping NOC record without timestamp: %s", gateway_id)
            continue
        updates.append(update)
    return updates
