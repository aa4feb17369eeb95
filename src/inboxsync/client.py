"""High-level async client wiring the REST/MQTT adapters to the sync stores."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from inboxsync._api.conversations import HttpConversationService, HttpUserDirectory
from inboxsync._api.notifications import HttpNotificationService
from inboxsync._mqtt import MqttPushChannel
from inboxsync._transport import JsonTransport
from inboxsync.config import SyncConfig
from inboxsync.exceptions import InboxSyncError
from inboxsync.state.conversations import ConversationSyncStore
from inboxsync.state.notifications import NotificationSyncStore

_logger = logging.getLogger(__name__)


class SyncClient:
    """Async client for the notification and conversation services.

    Usage::

        async with SyncClient(SyncConfig.from_env()) as client:
            notifications = await client.notification_store("alice")
            conversations = await client.conversation_store("alice")
            await conversations.send_message("bob", "hello")
    """

    def __init__(self, config: SyncConfig, *, session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._notifications: HttpNotificationService | None = None
        self._conversations: HttpConversationService | None = None
        self._users: HttpUserDirectory | None = None
        self._stores: list[NotificationSyncStore | ConversationSyncStore] = []

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SyncClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = JsonTransport(self._config, self._http_session)
        push = MqttPushChannel(self._config) if self._config.mqtt_enabled else None
        self._notifications = HttpNotificationService(transport, push=push)
        self._conversations = HttpConversationService(transport)
        self._users = HttpUserDirectory(transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        stores, self._stores = self._stores, []
        for store in stores:
            await store.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._notifications = None
        self._conversations = None
        self._users = None

    # ------------------------------------------------------------------
    # Store factories
    # ------------------------------------------------------------------

    def _require_services(self) -> tuple[HttpNotificationService, HttpConversationService, HttpUserDirectory]:
        if self._notifications is None or self._conversations is None or self._users is None:
            raise InboxSyncError("Client not initialized. Use 'async with SyncClient(...) as client:'")
        return self._notifications, self._conversations, self._users

    async def notification_store(self, user_id: str | None) -> NotificationSyncStore:
        """Create a notification store, subscribed for *user_id*."""
        notifications, _conversations, _users = self._require_services()
        store = NotificationSyncStore(notifications)
        self._stores.append(store)
        await store.set_user(user_id)
        return store

    async def conversation_store(self, user_id: str | None) -> ConversationSyncStore:
        """Create a conversation store, loaded for *user_id*."""
        notifications, conversations, users = self._require_services()
        store = ConversationSyncStore(conversations, notifications=notifications, users=users)
        self._stores.append(store)
        await store.set_user(user_id)
        return store
