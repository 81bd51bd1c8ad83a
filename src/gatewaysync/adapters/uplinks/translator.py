"""Translate uplink messages into normalized gateway updates."""

from __future__ import annotations

from logging import getLogger

from pydantic import ValidationError

from gatewaysync.domain.errors import DecodeError
from gatewaysync.domain.model import DEFAULT_NETWORK_ID, GatewayUpdate, UpdateSource

from .schema import UplinkGateway, UplinkMessage

log = getLogger(__name__)


def parse_gateway(message: UplinkMessage, gateway: UplinkGateway) -> GatewayUpdate | None:
    """Build the update for one gateway; its time is the envelope time.

    Entries without a gateway id are skipped. Missing coordinates become 0,0
    and are classified downstream like any other implausible location.
    """

    if gateway.gateway_id is None:
        return None
    return GatewayUpdate(
        network_id=message.network_id or DEFAULT_NETWORK_ID,
        gateway_id=gateway.gateway_id,
        time_ns=message.time,
        latitude=gateway.latitude if gateway.latitude is not None else 0.0,
        longitude=gateway.longitude if gateway.longitude is not None else 0.0,
        hardware_id=gateway.hardware_id,
        description=gateway.description,
        altitude=gateway.altitude,
        location_accuracy=gateway.location_accuracy,
        location_source=gateway.location_source,
        source=UpdateSource.UPLINK,
    )


def decode_uplink_message(body: bytes | str) -> list[GatewayUpdate]:
    """Decode a raw bus payload into one update per identifiable gateway.

    Raises :class:`DecodeError` when the payload is not a valid uplink message.
    """

    try:
        message = UplinkMessage.model_validate_json(body)
    except ValidationError as exc:
        raise DecodeError(
            f"Malformed uplink message ({exc.error_count()} errors): {exc}",
            source=UpdateSource.UPLINK,
        ) from exc

    updates: list[GatewayUpdate] = []
    for index, gateway in enumerate(message.gateways):
        update = parse_gateway(message, gateway)
        if update is None:
            log.warning("Skipping uplink gateway entry %s without gateway id", index)
            continue
        updates.append(update)
    return updates
