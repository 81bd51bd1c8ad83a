"""Metrics exporter settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_PROMETHEUS_PORT = 9100


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    port: int = DEFAULT_PROMETHEUS_PORT


def get_metrics_config() -> MetricsConfig:
    return MetricsConfig(port=env_int("PROMETHEUS_PORT", DEFAULT_PROMETHEUS_PORT))
