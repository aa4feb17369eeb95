"""Collaborator interfaces consumed by the sync stores.

The stores never talk to a transport directly; they call these structural
protocols. Return values are treated as untrusted and normalized by the
stores, hence the ``Any`` element types.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from inboxsync.models.conversation import Conversation, Message
from inboxsync.models.notification import Notification

PushHandler = Callable[[Any], None]
"""Receives one raw notification batch per push delivery."""


class Subscription(Protocol):
    """Cancellation handle for an open push subscription."""

    def cancel(self) -> None: ...


SubscriptionHandle = Subscription | Callable[[], Any]
"""What ``subscribe`` may return: a handle, or a bare unsubscribe callable."""


class NotificationService(Protocol):
    async def get_all(self, user_id: str) -> Sequence[Any]: ...

    async def mark_as_read(self, notification_id: str) -> None: ...

    async def delete(self, notification_id: str) -> None: ...

    async def clear_all(self, user_id: str) -> None: ...

    async def create(self, notification: Notification) -> None: ...

    async def subscribe(self, user_id: str, on_batch: PushHandler) -> SubscriptionHandle: ...


class ConversationService(Protocol):
    async def get_user_conversations(self, user_id: str) -> Sequence[Any]: ...

    async def get_messages(self, conversation_id: str) -> Sequence[Any]: ...

    async def create(self, conversation: Conversation) -> bool: ...

    async def update(self, conversation_id: str, conversation: Conversation) -> bool: ...

    async def delete(self, conversation_id: str) -> bool: ...

    async def send(self, message: Message) -> bool: ...


class UserDirectory(Protocol):
    async def get_all(self) -> Sequence[Any]: ...
