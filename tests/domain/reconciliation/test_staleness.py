from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from gatewaysync.domain.model import datetime_to_nanoseconds
from gatewaysync.domain.reconciliation import IdentityResolver, InMemoryCache, StalenessFilter

if TYPE_CHECKING:
    from collections.abc import Callable

    from gatewaysync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

HEARD_NS = datetime_to_nanoseconds(datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=UTC)) + 789


def _gateway_heard_at(
    factory: Callable[[], SqlAlchemyUnitOfWork],
    time_ns: int | None,
) -> int:
    gateway_db_id = IdentityResolver(factory).resolve("thethingsnetwork.org", "gw-1")
    if time_ns is not None:
        with factory() as uow:
            uow.repositories.gateways.update_last_heard(gateway_db_id, time_ns)
            uow.commit()
    return gateway_db_id


def test_never_heard_gateway_accepts_any_time(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    gateway_db_id = _gateway_heard_at(sqlite_unit_of_work, None)
    cache: InMemoryCache[int, int] = InMemoryCache()
    staleness = StalenessFilter(sqlite_unit_of_work, cache)

    assert staleness.is_newer(gateway_db_id, 0)
    assert len(cache) == 0


def test_cache_miss_loads_stored_time(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    gateway_db_id = _gateway_heard_at(sqlite_unit_of_work, HEARD_NS)
    cache: InMemoryCache[int, int] = InMemoryCache()
    staleness = StalenessFilter(sqlite_unit_of_work, cache)

    assert not staleness.is_newer(gateway_db_id, HEARD_NS - 1_000_000_000)
    assert cache.get(gateway_db_id) == HEARD_NS


def test_equal_time_is_stale_and_one_nanosecond_later_is_not(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    gateway_db_id = _gateway_heard_at(sqlite_unit_of_work, HEARD_NS)
    staleness = StalenessFilter(sqlite_unit_of_work)

    assert not staleness.is_newer(gateway_db_id, HEARD_NS)
    assert staleness.is_newer(gateway_db_id, HEARD_NS + 1)


def test_check_alone_does_not_advance_cache(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    gateway_db_id = _gateway_heard_at(sqlite_unit_of_work, HEARD_NS)
    cache: InMemoryCache[int, int] = InMemoryCache()
    staleness = StalenessFilter(sqlite_unit_of_work, cache)
    later = HEARD_NS + 300_000_000_000

    assert staleness.is_newer(gateway_db_id, later)
    assert cache.get(gateway_db_id) == HEARD_NS

    staleness.advance(gateway_db_id, later)

    assert cache.get(gateway_db_id) == later
    assert not staleness.is_newer(gateway_db_id, later)
