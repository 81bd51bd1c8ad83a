"""Message bus transport feeding uplink messages into reconciliation."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Any

import paho.mqtt.client as mqtt

if TYPE_CHECKING:
    from gatewaysync.config.mqtt import MqttConfig

type MessageHandler = Callable[[bytes], object]

log = getLogger(__name__)


def _default_client_factory(config: MqttConfig) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        client_id=config.client_id,
    )


class MqttUplinkSubscriber:
    """Subscribe to the uplink topic and pass every payload to ``handler``.

    paho runs the network loop on its own thread; the handler is expected to
    return quickly (it only decodes and enqueues).
    """

    def __init__(
        self,
        config: MqttConfig,
        handler: MessageHandler,
        *,
        client_factory: Callable[[MqttConfig], mqtt.Client] = _default_client_factory,
    ) -> None:
        self.config = config
        self.handler = handler
        self._client_factory = client_factory
        self._client: mqtt.Client | None = None

    @property
    def is_running(self) -> bool:
        return self._client is not None

    def start(self) -> None:
        self.stop()
        client = self._client_factory(self.config)
        client.enable_logger(log)
        if self.config.username is not None:
            client.username_pw_set(self.config.username, self.config.password)
        client.on_connect = self._on_connect
        client.on_message = self._on_message
        client.on_disconnect = self._on_disconnect

        log.info(
            "Connecting to message bus %s:%s topic=%s",
            self.config.host,
            self.config.port,
            self.config.topic,
        )
        client.connect(self.config.host, self.config.port, keepalive=self.config.keepalive)
        client.loop_start()
        self._client = client

    def stop(self) -> None:
        client = self._client
        self._client = None
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
            log.info("Message bus loop stopped")

    def _on_connect(
        self,
        client: mqtt.Client,
        _userdata: Any,
        _flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if reason_code.is_failure:
            log.warning("Message bus connect failed: %s", reason_code)
            return
        # Subscribing here restores the subscription after every reconnect.
        client.subscribe(self.config.topic, qos=0)
        log.info("Subscribed to %s", self.config.topic)

    def _on_message(self, _client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        try:
            self.handler(msg.payload)
        except Exception:
            log.exception("Uplink handler failed for topic %s", msg.topic)

    def _on_disconnect(
        self,
        _client: mqtt.Client,
        _userdata: Any,
        _disconnect_flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if self._client is not None:
            log.warning("Message bus disconnected: %s", reason_code)
