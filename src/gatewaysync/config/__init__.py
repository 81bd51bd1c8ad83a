"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .metrics import MetricsConfig, get_metrics_config
from .mqtt import MqttConfig, get_mqtt_config
from .pollers import BasicAuth, PollerConfig, get_noc_config, get_web_config
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .workers import WorkerConfig, get_worker_config

__all__ = [
    "BasicAuth",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "MetricsConfig",
    "MissingConfigurationError",
    "MqttConfig",
    "PollerConfig",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WorkerConfig",
    "get_database_config",
    "get_metrics_config",
    "get_mqtt_config",
    "get_noc_config",
    "get_reconciliation_config",
    "get_storage_config",
    "get_web_config",
    "get_worker_config",
    "require_env_vars",
]
