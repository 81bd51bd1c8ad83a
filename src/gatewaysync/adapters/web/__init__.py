"""Public interface for the gateway-data poller."""

from __future__ import annotations

from .client import WebFetcher
from .schema import WebGatewayDataResponse, WebGatewayStatus, WebLocation
from .translator import parse_listing, parse_status

__all__ = [
    "WebFetcher",
    "WebGatewayDataResponse",
    "WebGatewayStatus",
    "WebLocation",
    "parse_listing",
    "parse_status",
]
