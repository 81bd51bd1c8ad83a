"""Configuration for the periodic gateway status pollers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_bool, env_float, env_str, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

NOC_URL = "http://noc.thethingsnetwork.org:8085/api/v2/gateways"
WEB_URL = "https://www.thethingsnetwork.org/gateway-data/"
DEFAULT_FETCH_INTERVAL_SECONDS = 1200.0
POLLER_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)

    def as_tuple(self) -> tuple[str, str]:
        return (self.username, self.password)


@dataclass(frozen=True, slots=True)
class PollerConfig:
    """Holds the settings of one HTTP status poller."""

    name: str
    enabled: bool
    url: str
    interval_seconds: float
    resilience: ResilienceConfig
    auth: BasicAuth | None = None

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ConfigurationError(
                f"Fetch interval must be positive, got {self.interval_seconds}"
            )


def _resilience(name: str) -> ResilienceConfig:
    return ResilienceConfig(
        name=name,
        timeout_seconds=POLLER_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
    )


def _interval() -> float:
    return env_float("FETCH_INTERVAL", DEFAULT_FETCH_INTERVAL_SECONDS)


def get_noc_config(*, enabled: bool | None = None) -> PollerConfig:
    auth: BasicAuth | None = None
    if env_bool("NOC_BASIC_AUTH", default=False):
        values = require_env_vars(("NOC_USERNAME", "NOC_PASSWORD"))
        auth = BasicAuth(values["NOC_USERNAME"], values["NOC_PASSWORD"])
    return PollerConfig(
        name="noc",
        enabled=env_bool("FETCH_NOC", default=False) if enabled is None else enabled,
        url=env_str("NOC_URL", NOC_URL),
        interval_seconds=_interval(),
        resilience=_resilience("noc"),
        auth=auth,
    )


def get_web_config(*, enabled: bool | None = None) -> PollerConfig:
    return PollerConfig(
        name="web",
        enabled=env_bool("FETCH_WEB", default=True) if enabled is None else enabled,
        url=env_str("WEB_URL", WEB_URL),
        interval_seconds=_interval(),
        resilience=_resilience("web"),
    )
