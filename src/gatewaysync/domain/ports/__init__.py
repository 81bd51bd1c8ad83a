"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import GatewayStatusFetcher, UpdateSink
from .metrics import NullMetrics, ReconciliationMetrics
from .persistence import (
    GatewayLocationRepository,
    GatewayRepository,
    LocationForceRepository,
    Repository,
)
from .unit_of_work import (
    GatewayRepositories,
    GatewayUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
    UnitOfWorkFactory,
)

__all__ = [
    "GatewayLocationRepository",
    "GatewayRepositories",
    "GatewayRepository",
    "GatewayStatusFetcher",
    "GatewayUnitOfWork",
    "LocationForceRepository",
    "NullMetrics",
    "ReconciliationMetrics",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "UpdateSink",
]
