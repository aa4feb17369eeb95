from __future__ import annotations

import pytest

from inboxsync.config import SyncConfig
from inboxsync.exceptions import SyncConfigError


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INBOXSYNC_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("INBOXSYNC_API_TOKEN", "secret")
    monkeypatch.setenv("INBOXSYNC_MQTT_PORT", "8883")
    monkeypatch.setenv("INBOXSYNC_MQTT_TLS", "yes")
    monkeypatch.setenv("INBOXSYNC_MQTT_ENABLED", "off")
    monkeypatch.setenv("INBOXSYNC_API_TRACE_ENABLED", "true")

    config = SyncConfig.from_env()

    assert config.base_url == "https://api.example.com"
    assert config.api_token == "secret"
    assert config.mqtt_port == 8883
    assert config.mqtt_tls is True
    assert config.mqtt_enabled is False
    assert config.api_trace_enabled is True


def test_overrides_beat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INBOXSYNC_REQUEST_TIMEOUT", "3")

    config = SyncConfig.from_env(request_timeout=30.0, mqtt_enabled=True)

    assert config.request_timeout == 30.0
    assert config.mqtt_enabled is True


def test_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INBOXSYNC_MQTT_ENABLED", "maybe")

    assert SyncConfig.from_env().mqtt_enabled is True


def test_invalid_config_raises() -> None:
    with pytest.raises(SyncConfigError):
        SyncConfig(request_timeout=0)
    with pytest.raises(SyncConfigError):
        SyncConfig(base_url=" ")


def test_notification_topic() -> None:
    assert SyncConfig(mqtt_topic_prefix="/inbox/").notification_topic("alice") == "inbox/alice/notifications"
