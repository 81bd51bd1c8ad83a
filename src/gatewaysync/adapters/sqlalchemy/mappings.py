"""SQLAlchemy mapping metadata for the gateway domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from gatewaysync.domain.model import Gateway, GatewayLocation, GatewayLocationForce

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

gateway_table = Table(
    "gateways",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("network_id", String, nullable=False),
    Column("gateway_id", String, nullable=False),
    Column("hardware_id", String, nullable=True),
    Column("description", String, nullable=True),
    Column("latitude", Float, nullable=True),
    Column("longitude", Float, nullable=True),
    Column("altitude", Integer, nullable=True),
    Column("location_accuracy", Integer, nullable=True),
    Column("location_source", String, nullable=True),
    Column("last_heard", UTCDateTime(), nullable=True),
    Column("last_heard_ns", BigInteger, nullable=True),
    UniqueConstraint("network_id", "gateway_id", name="uq_gateways_identity"),
)

gateway_location_table = Table(
    "gateway_locations",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("network_id", String, nullable=False),
    Column("gateway_id", String, nullable=False),
    Column("installed_at", UTCDateTime(), nullable=False),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
)

Index(
    "ix_gateway_locations_identity_installed_at",
    gateway_location_table.c.network_id,
    gateway_location_table.c.gateway_id,
    gateway_location_table.c.installed_at.desc(),
)

gateway_location_force_table = Table(
    "gateway_location_forces",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("network_id", String, nullable=False),
    Column("gateway_id", String, nullable=False),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    UniqueConstraint("network_id", "gateway_id", name="uq_gateway_location_forces_identity"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Gateway, gateway_table)
    mapper_registry.map_imperatively(GatewayLocation, gateway_location_table)
    mapper_registry.map_imperatively(GatewayLocationForce, gateway_location_force_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
