"""MQTT push channel for notification batches."""

from __future__ import annotations

import asyncio
import json
import logging
import secrets
from typing import Any, cast

import paho.mqtt.client as mqtt

from inboxsync.config import SyncConfig
from inboxsync.exceptions import InboxSyncError, SyncSubscriptionError
from inboxsync.services import PushHandler


def decode_push_payload(payload: bytes) -> Any:
    """Decode a push payload into a raw notification batch.

    Accepts a bare JSON list or an object carrying a ``notifications`` list.
    """
    parsed = json.loads(payload.decode("utf-8"))
    if isinstance(parsed, dict):
        if "notifications" not in parsed:
            raise InboxSyncError("Push payload object has no 'notifications' field")
        return parsed["notifications"]
    return parsed


class MqttSubscription:
    """Threaded paho-mqtt client that hands batches to an asyncio loop.

    One instance per subscribed user. :meth:`cancel` disconnects and stops
    the network thread.
    """

    def __init__(
        self,
        *,
        config: SyncConfig,
        loop: asyncio.AbstractEventLoop,
        topic: str,
        on_batch: PushHandler,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._loop = loop
        self._topic = topic
        self._on_batch = on_batch
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def is_running(self) -> bool:
        return self._running

    def _handle_payload(self, topic: str, payload: bytes) -> None:
        if not self._running:
            return
        try:
            batch = decode_push_payload(payload)
        except Exception:
            self._logger.debug("MQTT payload parse failure topic=%s", topic, exc_info=True)
            return
        self._logger.debug("MQTT push received topic=%s", topic)
        self._loop.call_soon_threadsafe(self._on_batch, batch)

    def start(self) -> None:
        """Connect and subscribe. Blocking; run it in an executor."""
        config = self._config
        self._logger.debug(
            "MQTT subscription start requested host=%s port=%s topic=%s",
            config.mqtt_host,
            config.mqtt_port,
            self._topic,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=f"inboxsync-{secrets.token_hex(6)}",
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if config.mqtt_username:
            client.username_pw_set(config.mqtt_username, config.mqtt_password)
        if config.mqtt_tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected; subscribing topic=%s", self._topic)
            c.subscribe(self._topic, qos=1)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._handle_payload(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(config.mqtt_host, config.mqtt_port, keepalive=config.mqtt_keepalive)
        except OSError as exc:
            raise SyncSubscriptionError(f"MQTT connect to {config.mqtt_host}:{config.mqtt_port} failed: {exc}") from exc
        self._client = client
        self._running = True
        client.loop_start()
        self._logger.debug("MQTT network loop started")

    def cancel(self) -> None:
        """Disconnect and stop the network loop. Blocking; joins the network thread."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested topic=%s", self._topic)
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")


class MqttPushChannel:
    """Opens one :class:`MqttSubscription` per ``subscribe`` call."""

    def __init__(self, config: SyncConfig, *, logger: logging.Logger | None = None) -> None:
        self._config = config
        self._logger = logger or logging.getLogger(__name__)

    async def subscribe(self, user_id: str, on_batch: PushHandler) -> MqttSubscription:
        loop = asyncio.get_running_loop()
        subscription = MqttSubscription(
            config=self._config,
            loop=loop,
            topic=self._config.notification_topic(user_id),
            on_batch=on_batch,
            logger=self._logger,
        )
        await loop.run_in_executor(None, subscription.start)
        return subscription
