"""SQLAlchemy adapter package for gatewaysync."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    gateway_location_force_table,
    gateway_location_table,
    gateway_table,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyGatewayLocationRepository,
    SqlAlchemyGatewayRepository,
    SqlAlchemyLocationForceRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyGatewayLocationRepository",
    "SqlAlchemyGatewayRepository",
    "SqlAlchemyLocationForceRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "gateway_location_force_table",
    "gateway_location_table",
    "gateway_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
