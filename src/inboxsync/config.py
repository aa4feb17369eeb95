"""Client configuration for inboxsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from inboxsync.exceptions import SyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        REST API base URL, without trailing slash.
    api_token : str or None
        Bearer token sent with every HTTP request.
    request_timeout : float
        Total per-request timeout in seconds.
    mqtt_enabled : bool
        Open an MQTT push subscription for notifications. When disabled the
        notification store falls back to one-shot loads.
    mqtt_host : str
        Broker host name.
    mqtt_port : int
        Broker port.
    mqtt_tls : bool
        Use TLS for the broker connection.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_topic_prefix : str
        Topic prefix; notifications arrive on
        ``{prefix}/{user_id}/notifications``.
    mqtt_username, mqtt_password : str or None
        Optional broker credentials.
    api_trace_enabled : bool
        Log redacted request/response payloads at DEBUG level.
    """

    base_url: str = "http://localhost:8080/api"
    api_token: str | None = None
    request_timeout: float = 15.0
    mqtt_enabled: bool = True
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_tls: bool = False
    mqtt_keepalive: int = 60
    mqtt_topic_prefix: str = "inbox"
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise SyncConfigError("base_url must be non-empty")
        if self.request_timeout <= 0:
            raise SyncConfigError("request_timeout must be positive")
        if not self.mqtt_topic_prefix.strip("/"):
            raise SyncConfigError("mqtt_topic_prefix must be non-empty")

    def notification_topic(self, user_id: str) -> str:
        return f"{self.mqtt_topic_prefix.strip('/')}/{user_id}/notifications"

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads optional ``INBOXSYNC_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "INBOXSYNC_BASE_URL": "base_url",
            "INBOXSYNC_API_TOKEN": "api_token",
            "INBOXSYNC_MQTT_HOST": "mqtt_host",
            "INBOXSYNC_MQTT_TOPIC_PREFIX": "mqtt_topic_prefix",
            "INBOXSYNC_MQTT_USERNAME": "mqtt_username",
            "INBOXSYNC_MQTT_PASSWORD": "mqtt_password",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("INBOXSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        port_env = env.get("INBOXSYNC_MQTT_PORT")
        if port_env is not None and "mqtt_port" not in overrides:
            config_kwargs["mqtt_port"] = int(port_env)

        keepalive_env = env.get("INBOXSYNC_MQTT_KEEPALIVE")
        if keepalive_env is not None and "mqtt_keepalive" not in overrides:
            config_kwargs["mqtt_keepalive"] = int(keepalive_env)

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("INBOXSYNC_MQTT_ENABLED"), True)

        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("INBOXSYNC_MQTT_TLS"), False)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("INBOXSYNC_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
