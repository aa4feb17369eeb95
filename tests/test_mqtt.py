from __future__ import annotations

import asyncio
from typing import Any

import pytest

from inboxsync._mqtt import MqttSubscription, decode_push_payload
from inboxsync.config import SyncConfig
from inboxsync.exceptions import InboxSyncError


def test_decode_bare_list() -> None:
    assert decode_push_payload(b'[{"id": "1"}]') == [{"id": "1"}]


def test_decode_wrapped_batch() -> None:
    assert decode_push_payload(b'{"notifications": []}') == []


def test_decode_object_without_batch_raises() -> None:
    with pytest.raises(InboxSyncError):
        decode_push_payload(b'{"event": "ping"}')


@pytest.mark.asyncio
async def test_payloads_are_dispatched_onto_the_loop_while_running() -> None:
    received: list[Any] = []
    subscription = MqttSubscription(
        config=SyncConfig(),
        loop=asyncio.get_running_loop(),
        topic="inbox/alice/notifications",
        on_batch=received.append,
    )

    subscription._handle_payload("inbox/alice/notifications", b"[]")  # noqa: SLF001
    await asyncio.sleep(0)
    assert received == []

    subscription._running = True  # noqa: SLF001
    subscription._handle_payload("inbox/alice/notifications", b"not json")  # noqa: SLF001
    subscription._handle_payload("inbox/alice/notifications", b'[{"id": "1"}]')  # noqa: SLF001
    await asyncio.sleep(0)

    assert received == [[{"id": "1"}]]


def test_cancel_before_start_is_noop() -> None:
    subscription = MqttSubscription(
        config=SyncConfig(),
        loop=asyncio.new_event_loop(),
        topic="inbox/alice/notifications",
        on_batch=lambda batch: None,
    )
    try:
        subscription.cancel()
        assert subscription.is_running is False
    finally:
        subscription._loop.close()  # noqa: SLF001
