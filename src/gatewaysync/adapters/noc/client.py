"""HTTP poller for the network operations centre gateway listing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from gatewaysync.adapters.http_resilience import ResilientClient
from gatewaysync.config.pollers import get_noc_config
from gatewaysync.domain.errors import DecodeError
from gatewaysync.domain.model import UpdateSource

from .schema import NocStatusesResponse
from .translator import parse_statuses

if TYPE_CHECKING:
    from collections.abc import Callable

    from gatewaysync.config.pollers import PollerConfig
    from gatewaysync.domain.model import GatewayUpdate
    from gatewaysync.domain.ports.fetching import GatewayStatusFetcher

log = getLogger(__name__)


def _default_client_factory(config: PollerConfig) -> ResilientClient:
    return ResilientClient(
        config.resilience,
        auth=config.auth.as_tuple() if config.auth else None,
    )


@dataclass(slots=True)
class NocFetcher:
    config: PollerConfig = field(default_factory=get_noc_config)
    client_factory: Callable[[PollerConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    name: str = UpdateSource.NOC

    def __call__(self) -> list[GatewayUpdate]:
        return asyncio.run(self._fetch_async())

    async def _fetch_async(self) -> list[GatewayUpdate]:
        async with self.client_factory(self.config) as client:
            response = await client.get(self.config.url)
        response.raise_for_status()

        try:
            payload = NocStatusesResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(f"Unexpected NOC response: {exc}", source=self.name) from exc

        updates = parse_statuses(payload)
        log.info(
            "Fetched %s NOC statuses, %s with a timestamp", len(payload.statuses), len(updates)
        )
        return updates


if TYPE_CHECKING:
    _fetcher_check: GatewayStatusFetcher = NocFetcher()
