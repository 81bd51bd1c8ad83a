"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from gatewaysync.adapters.sqlalchemy.mappings import (
    gateway_location_force_table,
    gateway_location_table,
    gateway_table,
)
from gatewaysync.domain.errors import StoreError
from gatewaysync.domain.model import (
    Gateway,
    GatewayLocation,
    GatewayLocationForce,
    datetime_to_nanoseconds,
    nanoseconds_to_datetime,
)

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session

log = getLogger(__name__)

_IDENTITY_COLUMNS = ("network_id", "gateway_id")


class SqlAlchemyGatewayRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Gateway) -> None:
        self.session.add(entity)

    def get(self, gateway_db_id: int) -> Gateway | None:
        return self.session.get(Gateway, gateway_db_id)

    def find_id(self, network_id: str, gateway_id: str) -> int | None:
        stmt = (
            select(gateway_table.c.id)
            .where(gateway_table.c.network_id == network_id)
            .where(gateway_table.c.gateway_id == gateway_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_or_create_id(self, network_id: str, gateway_id: str) -> int:
        existing = self.find_id(network_id, gateway_id)
        if existing is not None:
            return existing

        self._insert_ignoring_conflict(network_id, gateway_id)
        created = self.find_id(network_id, gateway_id)
        if created is None:
            raise StoreError(f"Gateway {network_id}/{gateway_id} vanished after insert")
        log.info("New gateway %s/%s stored as %s", network_id, gateway_id, created)
        return created

    def last_heard_ns(self, gateway_db_id: int) -> int | None:
        stmt = select(gateway_table.c.last_heard_ns, gateway_table.c.last_heard).where(
            gateway_table.c.id == gateway_db_id
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        last_heard_ns, last_heard = row
        if last_heard_ns is None and last_heard is not None:
            # rows written without the nanosecond column
            return datetime_to_nanoseconds(last_heard)
        return last_heard_ns

    def update_last_heard(self, gateway_db_id: int, time_ns: int) -> None:
        self._update(
            gateway_db_id,
            {"last_heard": nanoseconds_to_datetime(time_ns), "last_heard_ns": time_ns},
        )

    def update_details(
        self,
        gateway_db_id: int,
        *,
        hardware_id: str | None = None,
        description: str | None = None,
    ) -> None:
        self._update(
            gateway_db_id,
            _present(hardware_id=hardware_id, description=description),
        )

    def update_location(
        self,
        gateway_db_id: int,
        *,
        latitude: float,
        longitude: float,
        altitude: int | None = None,
        location_accuracy: int | None = None,
        location_source: str | None = None,
    ) -> None:
        values: dict[str, object] = {"latitude": latitude, "longitude": longitude}
        values.update(
            _present(
                altitude=altitude,
                location_accuracy=location_accuracy,
                location_source=location_source,
            )
        )
        self._update(gateway_db_id, values)

    def _update(self, gateway_db_id: int, values: dict[str, object]) -> None:
        if not values:
            return
        stmt = update(gateway_table).where(gateway_table.c.id == gateway_db_id).values(**values)
        self.session.execute(stmt)

    def _insert_ignoring_conflict(self, network_id: str, gateway_id: str) -> None:
        values = {"network_id": network_id, "gateway_id": gateway_id}
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = (
                postgresql.insert(gateway_table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=list(_IDENTITY_COLUMNS))
            )
            self.session.execute(stmt)
            return
        if dialect == "sqlite":
            stmt = (
                sqlite.insert(gateway_table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=list(_IDENTITY_COLUMNS))
            )
            self.session.execute(stmt)
            return
        try:
            with self.session.begin_nested():
                self.session.execute(gateway_table.insert().values(**values))
        except IntegrityError:
            log.debug("Gateway %s/%s inserted concurrently", network_id, gateway_id)


class SqlAlchemyGatewayLocationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: GatewayLocation) -> None:
        self.session.add(entity)

    def latest(self, network_id: str, gateway_id: str) -> GatewayLocation | None:
        stmt = (
            self._for_identity(network_id, gateway_id)
            .order_by(
                gateway_location_table.c.installed_at.desc(),
                gateway_location_table.c.id.desc(),
            )
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    @staticmethod
    def _for_identity(network_id: str, gateway_id: str) -> Select[tuple[GatewayLocation]]:
        return (
            select(GatewayLocation)
            .where(gateway_location_table.c.network_id == network_id)
            .where(gateway_location_table.c.gateway_id == gateway_id)
        )


class SqlAlchemyLocationForceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: GatewayLocationForce) -> None:
        self.session.add(entity)

    def find(self, network_id: str, gateway_id: str) -> GatewayLocationForce | None:
        stmt = (
            select(GatewayLocationForce)
            .where(gateway_location_force_table.c.network_id == network_id)
            .where(gateway_location_force_table.c.gateway_id == gateway_id)
            .limit(1)
        )
        return self.session.scalars(stmt).first()


def _present(**values: object) -> dict[str, object]:
    """Drop absent attributes so they never overwrite stored values."""

    return {name: value for name, value in values.items() if value is not None}


if TYPE_CHECKING:
    from gatewaysync.domain.ports.persistence import (
        GatewayLocationRepository,
        GatewayRepository,
        LocationForceRepository,
    )

    _session_stub = cast("Session", object())
    _gateway_repo: GatewayRepository = SqlAlchemyGatewayRepository(_session_stub)
    _location_repo: GatewayLocationRepository = SqlAlchemyGatewayLocationRepository(_session_stub)
    _force_repo: LocationForceRepository = SqlAlchemyLocationForceRepository(_session_stub)
