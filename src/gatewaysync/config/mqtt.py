"""Message bus connection settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_int, env_str, optional_env_var

DEFAULT_MQTT_PORT = 1883
DEFAULT_MQTT_TOPIC = "gateways/status/#"
DEFAULT_MQTT_CLIENT_ID = "gatewaysync"


@dataclass(frozen=True, slots=True)
class MqttConfig:
    host: str
    port: int = DEFAULT_MQTT_PORT
    topic: str = DEFAULT_MQTT_TOPIC
    client_id: str = DEFAULT_MQTT_CLIENT_ID
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    keepalive: int = 60


def get_mqtt_config() -> MqttConfig | None:
    """Return the bus settings, or ``None`` when ``MQTT_HOST`` is not set."""

    host = optional_env_var("MQTT_HOST")
    if host is None:
        return None
    return MqttConfig(
        host=host,
        port=env_int("MQTT_PORT", DEFAULT_MQTT_PORT),
        topic=env_str("MQTT_TOPIC", DEFAULT_MQTT_TOPIC),
        client_id=env_str("MQTT_CLIENT_ID", DEFAULT_MQTT_CLIENT_ID),
        username=optional_env_var("MQTT_USERNAME"),
        password=optional_env_var("MQTT_PASSWORD"),
    )
