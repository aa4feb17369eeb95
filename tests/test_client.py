from __future__ import annotations

import pytest

from inboxsync.client import SyncClient
from inboxsync.config import SyncConfig
from inboxsync.exceptions import InboxSyncError
from inboxsync.state.events import StorePhase


@pytest.mark.asyncio
async def test_store_factories_require_context() -> None:
    client = SyncClient(SyncConfig(mqtt_enabled=False))

    with pytest.raises(InboxSyncError):
        await client.notification_store("alice")


@pytest.mark.asyncio
async def test_client_closes_its_stores() -> None:
    async with SyncClient(SyncConfig(mqtt_enabled=False)) as client:
        notifications = await client.notification_store(None)
        conversations = await client.conversation_store(None)
        assert notifications.phase == StorePhase.LIVE
        assert conversations.conversations == []

    assert notifications.closed is True
    assert conversations.closed is True
