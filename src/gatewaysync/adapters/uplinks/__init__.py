"""Public interface for the uplink message adapter."""

from __future__ import annotations

from .handler import UplinkMessageHandler
from .schema import UplinkGateway, UplinkMessage
from .translator import decode_uplink_message, parse_gateway

__all__ = [
    "UplinkGateway",
    "UplinkMessage",
    "UplinkMessageHandler",
    "decode_uplink_message",
    "parse_gateway",
]
