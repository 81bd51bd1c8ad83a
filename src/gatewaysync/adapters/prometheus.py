"""Prometheus export of the reconciliation counters and latency histogram."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

if TYPE_CHECKING:
    from gatewaysync.domain.ports.metrics import ReconciliationMetrics

log = getLogger(__name__)

DURATION_BUCKETS_MS: tuple[float, ...] = (
    0.1,
    0.2,
    0.3,
    0.4,
    0.5,
    0.6,
    0.7,
    0.8,
    0.9,
    1.0,
    1.5,
    2.0,
    5.0,
    10.0,
    100.0,
    1000.0,
    10000.0,
)


class PrometheusMetrics:
    """Reconciliation metrics registered on a Prometheus registry."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.registry = registry
        self.processed = Counter(
            "gatewaysync_gateway_processed",
            "The total number of gateway status updates processed",
            registry=registry,
        )
        self.new = Counter(
            "gatewaysync_gateway_new",
            "The total number of new gateways seen",
            registry=registry,
        )
        self.moved = Counter(
            "gatewaysync_gateway_moved",
            "The total number of gateways that moved",
            registry=registry,
        )
        self.duration = Histogram(
            "gatewaysync_gateway_processed_duration",
            "How long the processing of a gateway status took (ms)",
            buckets=DURATION_BUCKETS_MS,
            registry=registry,
        )

    def record_processed(self) -> None:
        self.processed.inc()

    def record_new(self) -> None:
        self.new.inc()

    def record_moved(self) -> None:
        self.moved.inc()

    def observe_duration_ms(self, milliseconds: float) -> None:
        self.duration.observe(milliseconds)


def serve_metrics(port: int, registry: CollectorRegistry = REGISTRY) -> None:
    """Expose ``registry`` over HTTP on a daemon thread."""

    start_http_server(port, registry=registry)
    log.info("Serving metrics on port %s", port)


if TYPE_CHECKING:
    _metrics_check: ReconciliationMetrics = PrometheusMetrics()
