"""Notification endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from inboxsync._api._common import path, unwrap_list
from inboxsync._transport import Transport
from inboxsync.exceptions import SyncSubscriptionError
from inboxsync.models.notification import Notification
from inboxsync.services import PushHandler, SubscriptionHandle


class PushChannel(Protocol):
    """Anything that can open a per-user notification push subscription."""

    async def subscribe(self, user_id: str, on_batch: PushHandler) -> SubscriptionHandle: ...


class HttpNotificationService:
    """:class:`inboxsync.services.NotificationService` over REST + optional push."""

    def __init__(self, transport: Transport, *, push: PushChannel | None = None) -> None:
        self._transport = transport
        self._push = push

    async def get_all(self, user_id: str) -> Sequence[Any]:
        decoded = await self._transport.request("GET", path("users", user_id, "notifications"))
        return unwrap_list(decoded, "notifications")

    async def mark_as_read(self, notification_id: str) -> None:
        await self._transport.request("PATCH", path("notifications", notification_id), {"read": True})

    async def delete(self, notification_id: str) -> None:
        await self._transport.request("DELETE", path("notifications", notification_id))

    async def clear_all(self, user_id: str) -> None:
        await self._transport.request("DELETE", path("users", user_id, "notifications"))

    async def create(self, notification: Notification) -> None:
        await self._transport.request("POST", path("notifications"), notification.to_wire())

    async def subscribe(self, user_id: str, on_batch: PushHandler) -> SubscriptionHandle:
        if self._push is None:
            raise SyncSubscriptionError("No push channel configured")
        return await self._push.subscribe(user_id, on_batch)
