"""Worker pool and cache sizing."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int, env_optional_int
from .errors import ConfigurationError

DEFAULT_WORKERS = 1


@dataclass(frozen=True, slots=True)
class WorkerConfig:
    workers: int = DEFAULT_WORKERS
    serialize_identities: bool = False
    cache_max_entries: int | None = None

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigurationError(f"Worker count must be positive, got {self.workers}")
        if self.cache_max_entries is not None and self.cache_max_entries < 1:
            raise ConfigurationError(
                f"Cache size must be positive, got {self.cache_max_entries}"
            )


def get_worker_config() -> WorkerConfig:
    return WorkerConfig(
        workers=env_int("GATEWAYSYNC_WORKERS", DEFAULT_WORKERS),
        serialize_identities=env_bool("GATEWAYSYNC_SERIALIZE_IDENTITIES", default=False),
        cache_max_entries=env_optional_int("GATEWAYSYNC_CACHE_MAX_ENTRIES"),
    )
