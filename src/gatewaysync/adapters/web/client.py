"""HTTP poller for the public gateway-data listing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from gatewaysync.adapters.http_resilience import ResilientClient
from gatewaysync.config.pollers import get_web_config
from gatewaysync.domain.errors import DecodeError
from gatewaysync.domain.model import UpdateSource

from .schema import WebGatewayDataResponse
from .translator import parse_listing

if TYPE_CHECKING:
    from collections.abc import Callable

    from gatewaysync.config.pollers import PollerConfig
    from gatewaysync.domain.model import GatewayUpdate
    from gatewaysync.domain.ports.fetching import GatewayStatusFetcher

log = getLogger(__name__)


def _default_client_factory(config: PollerConfig) -> ResilientClient:
    return ResilientClient(config.resilience)


@dataclass(slots=True)
class WebFetcher:
    config: PollerConfig = field(default_factory=get_web_config)
    client_factory: Callable[[PollerConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    name: str = UpdateSource.WEB

    def __call__(self) -> list[GatewayUpdate]:
        return asyncio.run(self._fetch_async())

    async def _fetch_async(self) -> list[GatewayUpdate]:
        async with self.client_factory(self.config) as client:
            response = await client.get(self.config.url)
        response.raise_for_status()

        try:
            payload = WebGatewayDataResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected gateway-data response: {exc}", source=self.name
            ) from exc

        updates = parse_listing(payload)
        log.info("Fetched %s gateway-data records, %s seen", len(payload.root), len(updates))
        return updates


if TYPE_CHECKING:
    _fetcher_check: GatewayStatusFetcher = WebFetcher()
