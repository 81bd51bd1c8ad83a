"""Application wiring for the gateway reconciliation service."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gatewaysync.adapters.mqtt import MqttUplinkSubscriber
from gatewaysync.adapters.noc import NocFetcher
from gatewaysync.adapters.prometheus import PrometheusMetrics, serve_metrics
from gatewaysync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, startup
from gatewaysync.adapters.uplinks import UplinkMessageHandler
from gatewaysync.adapters.web import WebFetcher
from gatewaysync.config.metrics import get_metrics_config
from gatewaysync.config.mqtt import get_mqtt_config
from gatewaysync.config.pollers import get_noc_config, get_web_config
from gatewaysync.config.reconciliation import get_reconciliation_config
from gatewaysync.config.storage import get_database_config
from gatewaysync.config.workers import get_worker_config
from gatewaysync.domain.reconciliation import (
    GatewayReconciler,
    InMemoryCache,
    NullLock,
    ShardedLock,
)
from gatewaysync.polling import PeriodicPoller, poll_once
from gatewaysync.worker_pool import WorkerPool

if TYPE_CHECKING:
    from gatewaysync.config.mqtt import MqttConfig
    from gatewaysync.config.pollers import PollerConfig
    from gatewaysync.config.reconciliation import ReconciliationConfig
    from gatewaysync.config.workers import WorkerConfig
    from gatewaysync.domain.ports.fetching import GatewayStatusFetcher
    from gatewaysync.domain.ports.metrics import ReconciliationMetrics
    from gatewaysync.domain.ports.unit_of_work import UnitOfWorkFactory

type PollerSpec = tuple[GatewayStatusFetcher, PollerConfig]

log = getLogger(__name__)


def build_reconciler(
    *,
    unit_of_work_factory: UnitOfWorkFactory = SqlAlchemyUnitOfWork,
    metrics: ReconciliationMetrics | None = None,
    workers: WorkerConfig | None = None,
    rules: ReconciliationConfig | None = None,
) -> GatewayReconciler:
    """Compose a reconciler with its caches sized from configuration."""

    worker_config = workers or get_worker_config()
    rule_config = rules or get_reconciliation_config()
    max_entries = worker_config.cache_max_entries
    return GatewayReconciler.create(
        unit_of_work_factory,
        identity_cache=InMemoryCache(max_entries=max_entries),
        last_heard_cache=InMemoryCache(max_entries=max_entries),
        metrics=metrics,
        movement=rule_config.movement_detector(),
        coordinate_rules=rule_config.coordinate_rules(),
        identity_lock=ShardedLock() if worker_config.serialize_identities else NullLock(),
    )


def build_fetchers(*, web: bool | None = None, noc: bool | None = None) -> list[PollerSpec]:
    """Return the enabled pollers with their settings (``None`` defers to the environment)."""

    fetchers: list[PollerSpec] = []
    web_config = get_web_config(enabled=web)
    if web_config.enabled:
        fetchers.append((WebFetcher(config=web_config), web_config))
    noc_config = get_noc_config(enabled=noc)
    if noc_config.enabled:
        fetchers.append((NocFetcher(config=noc_config), noc_config))
    return fetchers


@dataclass(slots=True)
class GatewaySyncService:
    """Running service: a worker pool fed by pollers and the message bus."""

    pool: WorkerPool
    pollers: list[PeriodicPoller] = field(default_factory=list)
    subscriber: MqttUplinkSubscriber | None = None

    def start(self) -> None:
        """Start the bus connection first, then workers and pollers.

        Raises :class:`OSError` when the bus cannot be reached; nothing has
        been started at that point.
        """

        if self.subscriber is not None:
            self.subscriber.start()
        self.pool.start()
        for poller in self.pollers:
            poller.start()

    def stop(self, timeout: float | None = None) -> None:
        if self.subscriber is not None:
            self.subscriber.stop()
        for poller in self.pollers:
            poller.stop(timeout)
        self.pool.stop(timeout)


def build_service(
    reconciler: GatewayReconciler,
    *,
    workers: int,
    fetchers: list[PollerSpec],
    mqtt_config: MqttConfig | None,
) -> GatewaySyncService:
    pool = WorkerPool(reconciler, workers=workers)
    pollers = [
        PeriodicPoller(fetcher, pool, interval_seconds=config.interval_seconds)
        for fetcher, config in fetchers
    ]
    subscriber = (
        MqttUplinkSubscriber(mqtt_config, UplinkMessageHandler(pool))
        if mqtt_config is not None
        else None
    )
    return GatewaySyncService(pool=pool, pollers=pollers, subscriber=subscriber)


def run_pollers_once(
    reconciler: GatewayReconciler,
    fetchers: list[PollerSpec],
    *,
    workers: int = 1,
) -> int:
    """Fetch every poller a single time and wait until all updates are reconciled."""

    pool = WorkerPool(reconciler, workers=workers)
    pool.start()
    try:
        submitted = sum(poll_once(fetcher, pool) for fetcher, _ in fetchers)
        pool.join()
    finally:
        pool.stop()
    log.info("Single pass finished: %s updates submitted", submitted)
    return submitted


def start_service(
    *,
    workers: int | None = None,
    web: bool | None = None,
    noc: bool | None = None,
    once: bool = False,
) -> GatewaySyncService | None:
    """Connect the store and start the service (or run a single poll pass).

    Raises :class:`~gatewaysync.domain.errors.StoreError` when the store is unreachable.
    """

    database = get_database_config()
    worker_config = get_worker_config()
    effective_workers = workers or worker_config.workers
    mqtt_config = get_mqtt_config()
    metrics_config = get_metrics_config()
    fetchers = build_fetchers(web=web, noc=noc)

    log.info(
        "Starting gatewaysync: workers=%s, pollers=%s, mqtt=%s, metrics_port=%s",
        effective_workers,
        [fetcher.name for fetcher, _ in fetchers] or "none",
        f"{mqtt_config.host}:{mqtt_config.port}" if mqtt_config else "disabled",
        metrics_config.port,
    )

    startup(database_uri=database.uri, echo=database.echo)
    metrics = PrometheusMetrics()
    reconciler = build_reconciler(metrics=metrics, workers=worker_config)

    if once:
        run_pollers_once(reconciler, fetchers, workers=effective_workers)
        return None

    serve_metrics(metrics_config.port)
    service = build_service(
        reconciler,
        workers=effective_workers,
        fetchers=fetchers,
        mqtt_config=mqtt_config,
    )
    service.start()
    return service
