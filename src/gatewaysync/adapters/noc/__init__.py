"""Public interface for the NOC status poller."""

from __future__ import annotations

from .client import NocFetcher
from .schema import NocGatewayStatus, NocLocation, NocStatusesResponse
from .translator import parse_status, parse_statuses

__all__ = [
    "NocFetcher",
    "NocGatewayStatus",
    "NocLocation",
    "NocStatusesResponse",
    "parse_status",
    "parse_statuses",
]
