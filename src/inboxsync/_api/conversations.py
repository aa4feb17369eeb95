"""Conversation, message and user directory endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from inboxsync._api._common import path, request_ok, unwrap_list
from inboxsync._transport import Transport
from inboxsync.identity import conversation_id
from inboxsync.models.conversation import Conversation, Message


class HttpConversationService:
    """:class:`inboxsync.services.ConversationService` over REST."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_user_conversations(self, user_id: str) -> Sequence[Any]:
        decoded = await self._transport.request("GET", path("users", user_id, "conversations"))
        return unwrap_list(decoded, "conversations")

    async def get_messages(self, conv_id: str) -> Sequence[Any]:
        decoded = await self._transport.request("GET", path("conversations", conv_id, "messages"))
        return unwrap_list(decoded, "messages")

    async def create(self, conversation: Conversation) -> bool:
        return await request_ok(self._transport, "PUT", path("conversations", conversation.id), conversation.to_wire())

    async def update(self, conv_id: str, conversation: Conversation) -> bool:
        return await request_ok(self._transport, "PATCH", path("conversations", conv_id), conversation.to_wire())

    async def delete(self, conv_id: str) -> bool:
        return await request_ok(self._transport, "DELETE", path("conversations", conv_id))

    async def send(self, message: Message) -> bool:
        conv_id = conversation_id(message.sender_id, message.receiver_id)
        return await request_ok(self._transport, "POST", path("conversations", conv_id, "messages"), message.to_wire())


class HttpUserDirectory:
    """:class:`inboxsync.services.UserDirectory` over REST."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_all(self) -> Sequence[Any]:
        decoded = await self._transport.request("GET", path("users"))
        return unwrap_list(decoded, "users")
