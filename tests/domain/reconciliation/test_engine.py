from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from gatewaysync.adapters.sqlalchemy.mappings import gateway_location_table
from gatewaysync.domain.errors import StoreError
from gatewaysync.domain.model import (
    SENTINEL,
    CoordinateRejection,
    Coordinates,
    GatewayLocation,
    GatewayLocationForce,
    ReconciliationOutcome,
)
from gatewaysync.domain.reconciliation import GatewayReconciler, ShardedLock
from tests.helpers.updates import RecordingMetrics, make_update

if TYPE_CHECKING:
    from collections.abc import Callable

    from gatewaysync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from gatewaysync.domain.model import Gateway

NETWORK = "thethingsnetwork.org"


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def reconciler(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    metrics: RecordingMetrics,
) -> GatewayReconciler:
    return GatewayReconciler.create(sqlite_unit_of_work, metrics=metrics)


def _gateway(factory: Callable[[], SqlAlchemyUnitOfWork], gateway_db_id: int) -> Gateway:
    with factory() as uow:
        gateway = uow.repositories.gateways.get(gateway_db_id)
        assert gateway is not None
        return gateway


def _history(
    factory: Callable[[], SqlAlchemyUnitOfWork],
    gateway_id: str = "eui-0000000000000001",
) -> list[GatewayLocation]:
    stmt = (
        select(GatewayLocation)
        .where(gateway_location_table.c.network_id == NETWORK)
        .where(gateway_location_table.c.gateway_id == gateway_id)
        .order_by(gateway_location_table.c.installed_at.desc(), gateway_location_table.c.id.desc())
    )
    with factory() as uow:
        return list(uow.session.scalars(stmt))


def test_first_report_creates_gateway_and_history(
    reconciler: GatewayReconciler,
    metrics: RecordingMetrics,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    update = make_update(seconds=0, hardware_id="0000024B08060112", altitude=12)

    result = reconciler.reconcile(update)

    assert result.outcome is ReconciliationOutcome.NEW
    gateway = _gateway(sqlite_unit_of_work, result.gateway_db_id)
    assert gateway.last_heard == update.heard_at
    assert gateway.hardware_id == "0000024B08060112"
    assert (gateway.latitude, gateway.longitude) == update.coordinates.as_tuple()
    assert gateway.altitude == 12
    history = _history(sqlite_unit_of_work)
    assert len(history) == 1
    assert history[0].installed_at == update.heard_at
    assert (metrics.processed, metrics.new, metrics.moved) == (1, 1, 0)
    assert len(metrics.durations) == 1


def test_duplicate_and_older_reports_are_stale(
    reconciler: GatewayReconciler,
    metrics: RecordingMetrics,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    first = reconciler.reconcile(make_update(seconds=10))

    duplicate = reconciler.reconcile(make_update(seconds=10, latitude=48.8566, longitude=2.3522))
    older = reconciler.reconcile(make_update(seconds=5, description="late"))

    assert duplicate.outcome is ReconciliationOutcome.STALE
    assert older.outcome is ReconciliationOutcome.STALE
    gateway = _gateway(sqlite_unit_of_work, first.gateway_db_id)
    assert gateway.last_heard == make_update(seconds=10).heard_at
    assert gateway.description is None
    assert len(_history(sqlite_unit_of_work)) == 1
    assert metrics.processed == 3
    assert len(metrics.durations) == 1


def test_relocation_appends_history(
    reconciler: GatewayReconciler,
    metrics: RecordingMetrics,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler.reconcile(make_update(seconds=0, latitude=52.3676, longitude=4.9041))

    result = reconciler.reconcile(make_update(seconds=60, latitude=52.3721, longitude=4.9041))

    assert result.outcome is ReconciliationOutcome.MOVED
    history = _history(sqlite_unit_of_work)
    assert [location.latitude for location in history] == [52.3721, 52.3676]
    gateway = _gateway(sqlite_unit_of_work, result.gateway_db_id)
    assert gateway.latitude == 52.3721
    assert (metrics.new, metrics.moved) == (1, 1)


def test_jitter_only_refreshes_last_heard(
    reconciler: GatewayReconciler,
    metrics: RecordingMetrics,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler.reconcile(make_update(seconds=0, latitude=52.3676, longitude=4.9041))
    later = make_update(seconds=60, latitude=52.3677, longitude=4.9041)

    result = reconciler.reconcile(later)

    assert result.outcome is ReconciliationOutcome.NOT_MOVED
    gateway = _gateway(sqlite_unit_of_work, result.gateway_db_id)
    assert gateway.last_heard == later.heard_at
    assert gateway.latitude == 52.3676
    assert len(_history(sqlite_unit_of_work)) == 1
    assert (metrics.new, metrics.moved) == (1, 0)
    assert len(metrics.durations) == 2


def test_placeholder_coordinates_are_stored_as_sentinel(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = reconciler.reconcile(make_update(seconds=0, latitude=52.0, longitude=6.0))

    assert result.outcome is ReconciliationOutcome.NEW
    assert result.coordinates == SENTINEL
    assert result.rejection is CoordinateRejection.PLACEHOLDER
    history = _history(sqlite_unit_of_work)
    assert [(location.latitude, location.longitude) for location in history] == [(0.0, 0.0)]

    repeat = reconciler.reconcile(make_update(seconds=30, latitude=0.2, longitude=0.3))

    assert repeat.outcome is ReconciliationOutcome.NOT_MOVED
    assert repeat.rejection is CoordinateRejection.NULL_ISLAND


def test_forced_coordinates_bypass_validation(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.location_forces.add(
            GatewayLocationForce(
                network_id=NETWORK,
                gateway_id="eui-0000000000000001",
                latitude=51.4416,
                longitude=5.4697,
            )
        )
        uow.commit()

    result = reconciler.reconcile(make_update(seconds=0, latitude=0.0, longitude=0.0))

    assert result.forced
    assert result.rejection is None
    assert result.coordinates == Coordinates(51.4416, 5.4697)
    gateway = _gateway(sqlite_unit_of_work, result.gateway_db_id)
    assert (gateway.latitude, gateway.longitude) == (51.4416, 5.4697)


def test_absent_attributes_never_clear_stored_values(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler.reconcile(
        make_update(
            seconds=0,
            description="rooftop",
            hardware_id="0000024B08060112",
            altitude=40,
            location_accuracy=5,
            location_source="gps",
        )
    )

    result = reconciler.reconcile(make_update(seconds=60, latitude=52.3800))

    assert result.outcome is ReconciliationOutcome.MOVED
    gateway = _gateway(sqlite_unit_of_work, result.gateway_db_id)
    assert gateway.description == "rooftop"
    assert gateway.hardware_id == "0000024B08060112"
    assert gateway.altitude == 40
    assert gateway.location_accuracy == 5
    assert gateway.location_source == "gps"
    assert gateway.latitude == 52.3800


def test_reported_zero_altitude_is_written(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler.reconcile(make_update(seconds=0, altitude=40))

    result = reconciler.reconcile(make_update(seconds=60, latitude=52.3800, altitude=0))

    assert _gateway(sqlite_unit_of_work, result.gateway_db_id).altitude == 0


def test_details_update_without_movement(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler.reconcile(make_update(seconds=0))

    result = reconciler.reconcile(make_update(seconds=60, description="new antenna"))

    assert result.outcome is ReconciliationOutcome.NOT_MOVED
    assert _gateway(sqlite_unit_of_work, result.gateway_db_id).description == "new antenna"


def test_restarted_service_rejects_stale_updates_from_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    GatewayReconciler.create(sqlite_unit_of_work).reconcile(make_update(seconds=100))
    metrics = RecordingMetrics()
    restarted = GatewayReconciler.create(sqlite_unit_of_work, metrics=metrics)

    result = restarted.reconcile(make_update(seconds=50))

    assert result.outcome is ReconciliationOutcome.STALE
    assert metrics.processed == 1
    assert metrics.durations == []


def test_sub_microsecond_ordering_is_kept(
    reconciler: GatewayReconciler,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    first = make_update(seconds=10)
    later = replace(first, time_ns=first.time_ns + 500, description="later")
    assert later.heard_at == first.heard_at

    reconciler.reconcile(first)
    result = reconciler.reconcile(later)

    assert result.outcome is ReconciliationOutcome.NOT_MOVED
    assert _gateway(sqlite_unit_of_work, result.gateway_db_id).description == "later"

    restarted = GatewayReconciler.create(sqlite_unit_of_work)
    assert restarted.reconcile(replace(first, time_ns=first.time_ns + 499)).outcome is (
        ReconciliationOutcome.STALE
    )
    assert restarted.reconcile(replace(first, time_ns=first.time_ns + 501)).outcome is (
        ReconciliationOutcome.NOT_MOVED
    )


def test_serialized_identities_give_same_results(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    reconciler = GatewayReconciler.create(sqlite_unit_of_work, identity_lock=ShardedLock(4))

    outcomes = [
        reconciler.reconcile(make_update(seconds=seconds, latitude=latitude)).outcome
        for seconds, latitude in ((0, 52.3676), (10, 52.3676), (5, 52.3676), (20, 52.4000))
    ]

    assert outcomes == [
        ReconciliationOutcome.NEW,
        ReconciliationOutcome.NOT_MOVED,
        ReconciliationOutcome.STALE,
        ReconciliationOutcome.MOVED,
    ]


def test_store_failure_counts_processed_and_propagates(metrics: RecordingMetrics) -> None:
    class UnreachableUnitOfWork:
        def __enter__(self) -> UnreachableUnitOfWork:
            raise StoreError("connection refused")

        def __exit__(self, *_: object) -> None:
            return None

    reconciler = GatewayReconciler.create(
        UnreachableUnitOfWork,  # type: ignore[arg-type]
        metrics=metrics,
    )

    with pytest.raises(StoreError):
        reconciler.reconcile(make_update())

    assert metrics.processed == 1
    assert metrics.durations == []


def test_documented_scenario_sequence(
    reconciler: GatewayReconciler,
    metrics: RecordingMetrics,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    gateway_id = "eui-0000000000000001"
    # 0.00225 degrees of latitude is about 250 m, 0.00045 about 50 m.
    steps = [
        (make_update(seconds=10, latitude=-25.7, longitude=28.2), ReconciliationOutcome.NEW),
        (make_update(seconds=20, latitude=-25.69775, longitude=28.2), ReconciliationOutcome.MOVED),
        (
            make_update(seconds=30, latitude=-25.6973, longitude=28.2),
            ReconciliationOutcome.NOT_MOVED,
        ),
        (make_update(seconds=5, latitude=-25.7, longitude=28.2), ReconciliationOutcome.STALE),
        (make_update(seconds=40, latitude=52.0, longitude=6.0), ReconciliationOutcome.MOVED),
    ]

    for update, expected in steps:
        assert reconciler.reconcile(update).outcome is expected

    history = _history(sqlite_unit_of_work, gateway_id)
    assert [(entry.latitude, entry.longitude) for entry in history] == [
        (0.0, 0.0),
        (-25.69775, 28.2),
        (-25.7, 28.2),
    ]
    assert (metrics.processed, metrics.new, metrics.moved) == (5, 1, 2)

    with sqlite_unit_of_work() as uow:
        uow.repositories.location_forces.add(
            GatewayLocationForce(
                network_id=NETWORK,
                gateway_id=gateway_id,
                latitude=10.0,
                longitude=10.0,
            )
        )
        uow.commit()

    forced = reconciler.reconcile(make_update(seconds=50, latitude=-33.9, longitude=18.4))

    gateway = _gateway(sqlite_unit_of_work, forced.gateway_db_id)
    assert (gateway.latitude, gateway.longitude) == (10.0, 10.0)
    assert gateway.last_heard == make_update(seconds=50).heard_at
