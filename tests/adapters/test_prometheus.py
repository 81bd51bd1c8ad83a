from __future__ import annotations

from prometheus_client import CollectorRegistry

from gatewaysync.adapters.prometheus import DURATION_BUCKETS_MS, PrometheusMetrics
from gatewaysync.domain.ports.metrics import ReconciliationMetrics


def test_metrics_are_exported_under_service_names() -> None:
    registry = CollectorRegistry()
    metrics = PrometheusMetrics(registry)

    metrics.record_processed()
    metrics.record_processed()
    metrics.record_new()
    metrics.record_moved()
    metrics.observe_duration_ms(0.35)
    metrics.observe_duration_ms(250.0)

    assert isinstance(metrics, ReconciliationMetrics)
    assert registry.get_sample_value("gatewaysync_gateway_processed_total") == 2.0
    assert registry.get_sample_value("gatewaysync_gateway_new_total") == 1.0
    assert registry.get_sample_value("gatewaysync_gateway_moved_total") == 1.0
    assert registry.get_sample_value("gatewaysync_gateway_processed_duration_count") == 2.0
    assert (
        registry.get_sample_value(
            "gatewaysync_gateway_processed_duration_bucket", {"le": "0.4"}
        )
        == 1.0
    )
    assert (
        registry.get_sample_value(
            "gatewaysync_gateway_processed_duration_bucket", {"le": "1000.0"}
        )
        == 2.0
    )


def test_duration_buckets_cover_sub_millisecond_to_ten_seconds() -> None:
    assert DURATION_BUCKETS_MS[0] == 0.1
    assert DURATION_BUCKETS_MS[-1] == 10000.0
    assert list(DURATION_BUCKETS_MS) == sorted(DURATION_BUCKETS_MS)
