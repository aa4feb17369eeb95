"""Conversation store.

Mutations are reconciled by a full reload rather than patched locally:
the conversation service offers no partial-update or versioning primitive,
so the reload is the only authoritative merge point.
"""

from __future__ import annotations

import asyncio
import logging

from inboxsync.exceptions import SyncConsistencyError, SyncServiceError, SyncValidationError
from inboxsync.identity import conversation_id, generate_id
from inboxsync.ingestion.normalize import timestamp_sort_key, utc_now_iso
from inboxsync.ingestion.records import normalize_conversations, normalize_messages, normalize_users
from inboxsync.models.conversation import Conversation, Message
from inboxsync.models.notification import Notification
from inboxsync.services import ConversationService, NotificationService, UserDirectory
from inboxsync.state.events import IngestionSource, StorePhase
from inboxsync.state.store import SyncStore, error_message
from inboxsync.state.views import (
    conversation_unread_count,
    find_conversation,
    find_conversation_between,
    find_conversation_with_participant,
    total_unread_count,
)

_logger = logging.getLogger(__name__)

MESSAGE_NOTIFICATION_TYPE = "message"
MESSAGE_NOTIFICATION_TITLE = "New Message"


def _sort_newest_first(conversations: list[Conversation]) -> list[Conversation]:
    # Missing or unparseable updatedAt sorts as epoch 0, i.e. last.
    return sorted(conversations, key=lambda conv: timestamp_sort_key(conv.updated_at), reverse=True)


class ConversationSyncStore(SyncStore[Conversation]):
    """Conversations (with embedded messages) for one user.

    Parameters
    ----------
    conversations : ConversationService
        Remote conversation/message operations.
    notifications : NotificationService, optional
        Used for the best-effort "new message" notification sent to the
        receiver after :meth:`send_message`. Skipped when omitted.
    users : UserDirectory, optional
        Resolves the sender's display name for that notification.
    """

    def __init__(
        self,
        conversations: ConversationService,
        *,
        notifications: NotificationService | None = None,
        users: UserDirectory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger=logger or _logger)
        self._service = conversations
        self._notifications = notifications
        self._users = users

    @property
    def conversations(self) -> list[Conversation]:
        return self._entities()

    async def set_user(self, user_id: str | None) -> None:
        self._begin_user(user_id)
        if self.user_id is not None:
            await self.load()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch conversation summaries and their messages; replace the list.

        A failed message fetch degrades that conversation to no messages.
        A failed summary fetch empties the list and records the error.
        """
        user_id = self.user_id
        if user_id is None:
            self._update(entities=(), is_loading=False)
            return

        generation = self._generation
        self._logger.debug("Loading conversations for user=%s", user_id)
        self._update(is_loading=True, error=None)
        try:
            raw = await self._service.get_user_conversations(user_id)
            if not isinstance(raw, (list, tuple)):
                self._logger.warning("get_user_conversations returned %s, expected a list", type(raw).__name__)
            summaries = normalize_conversations(raw)
            loaded = await asyncio.gather(*(self._with_messages(summary) for summary in summaries))
        except Exception as exc:
            self._logger.warning("Error loading conversations", exc_info=True)
            if self._is_current(generation):
                self._update(
                    entities=(),
                    error=error_message(exc, "Failed to load conversations"),
                    is_loading=False,
                    phase=StorePhase.LIVE,
                )
            return

        if not self._is_current(generation):
            return
        self._update(
            entities=_sort_newest_first(list(loaded)),
            is_loading=False,
            source=IngestionSource.RELOAD,
            phase=StorePhase.LIVE,
        )
        self._logger.debug("Loaded %d conversations for user=%s", len(loaded), user_id)

    async def _with_messages(self, summary: Conversation) -> Conversation:
        try:
            raw = await self._service.get_messages(summary.id)
        except Exception:
            self._logger.warning("Error loading messages for conversation=%s", summary.id, exc_info=True)
            raw = []
        return summary.model_copy(update={"messages": normalize_messages(raw)})

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send_message(self, receiver_id: str, content: str) -> Message:
        """Send a message, then reload to pick up the authoritative conversation."""
        user_id = self.user_id
        if not user_id:
            raise SyncValidationError("User ID is required")
        if not receiver_id:
            raise SyncValidationError("Receiver ID is required")
        if not content or not content.strip():
            raise SyncValidationError("Message content is required")

        self._update(error=None)
        message = Message(
            id=generate_id(),
            sender_id=user_id,
            receiver_id=receiver_id,
            content=content.strip(),
            timestamp=utc_now_iso(),
            read=False,
        )
        self._logger.debug("Sending message id=%s to=%s", message.id, receiver_id)

        generation = self._generation
        try:
            if not await self._service.send(message):
                raise SyncServiceError("Failed to send message")
        except Exception as exc:
            self._record_failure(exc, "Failed to send message", generation=generation)
            raise

        if not self._is_stale(generation, "send_message"):
            await self.load()
        await self._notify_receiver(message)
        return message

    async def _notify_receiver(self, message: Message) -> None:
        """Best effort: failures are logged, never raised."""
        if self._notifications is None or self._users is None:
            return
        try:
            users = normalize_users(await self._users.get_all())
            sender = next((user for user in users if user.id == message.sender_id), None)
            if sender is None or not sender.full_name:
                self._logger.debug("No display name for sender=%s; skipping notification", message.sender_id)
                return
            notification = Notification(
                id=generate_id(),
                user_id=message.receiver_id,
                type=MESSAGE_NOTIFICATION_TYPE,
                title=MESSAGE_NOTIFICATION_TITLE,
                message=f"{sender.full_name} sent you a message",
                data={"senderId": message.sender_id, "messageId": message.id},
                read=False,
                created_at=utc_now_iso(),
            )
            await self._notifications.create(notification)
        except Exception:
            self._logger.warning("Error creating notification for message=%s", message.id, exc_info=True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_conversation(self, participant_id: str) -> Conversation | None:
        user_id = self.user_id
        if not user_id or not participant_id:
            return None
        return find_conversation_with_participant(self._snapshot.entities, user_id, participant_id)

    def get_conversation_with_user(self, other_user_id: str) -> Conversation | None:
        user_id = self.user_id
        if not user_id or not other_user_id:
            return None
        return find_conversation_between(self._snapshot.entities, user_id, other_user_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def mark_messages_as_read(self, conv_id: str) -> None:
        """Flip ``read`` on messages addressed to the current user, then reload.

        A missing conversation, or one with nothing unread, is a no-op and
        makes no remote call.
        """
        user_id = self.user_id
        if not conv_id or not user_id:
            raise SyncValidationError("Conversation ID and User ID are required")

        self._update(error=None)
        conversation = find_conversation(self._snapshot.entities, conv_id)
        if conversation is None:
            self._logger.debug("Conversation not found: %s", conv_id)
            return

        changed = False
        messages: list[Message] = []
        for message in conversation.messages:
            if message.is_unread_for(user_id):
                message = message.model_copy(update={"read": True})
                changed = True
            messages.append(message)
        if not changed:
            return

        updated = conversation.model_copy(update={"messages": messages})
        generation = self._generation
        try:
            if not await self._service.update(conv_id, updated):
                raise SyncServiceError("Failed to update conversation")
        except Exception as exc:
            self._record_failure(exc, "Failed to mark messages as read", generation=generation)
            raise

        if not self._is_stale(generation, "mark_messages_as_read"):
            await self.load()

    async def delete_conversation(self, conv_id: str) -> bool:
        """Delete a conversation the current user participates in.

        Returns ``False`` without any remote call when the conversation is
        unknown or the user is not a participant.
        """
        user_id = self.user_id
        if not conv_id or not user_id:
            self._logger.warning("Conversation ID and User ID are required for deletion")
            return False

        self._update(error=None)
        conversation = find_conversation(self._snapshot.entities, conv_id)
        if conversation is None:
            self._logger.warning("Conversation not found for deletion: %s", conv_id)
            return False
        if not conversation.has_participant(user_id):
            self._logger.warning("User %s not authorized to delete conversation %s", user_id, conv_id)
            return False

        generation = self._generation
        try:
            if not await self._service.delete(conv_id):
                raise SyncServiceError("Failed to delete conversation")
        except Exception as exc:
            self._record_failure(exc, "Failed to delete conversation", generation=generation)
            raise

        if not self._is_stale(generation, "delete_conversation"):
            await self.load()
        return True

    async def create_conversation(self, other_user_id: str) -> Conversation:
        """Return the conversation with *other_user_id*, creating it if needed.

        Idempotent: an existing local conversation is returned without any
        remote call. If the store switches users before the reload, the
        record sent to the service is returned and the store is not reloaded.
        """
        user_id = self.user_id
        if not user_id:
            raise SyncValidationError("User ID is required")
        if not other_user_id:
            raise SyncValidationError("Other user ID is required")
        if user_id == other_user_id:
            raise SyncValidationError("Cannot create conversation with yourself")

        self._update(error=None)
        existing = self.get_conversation_with_user(other_user_id)
        if existing is not None:
            self._logger.debug("Conversation already exists: %s", existing.id)
            return existing

        conversation = Conversation(
            id=conversation_id(user_id, other_user_id),
            participants=[user_id, other_user_id],
            messages=[],
            updated_at=utc_now_iso(),
        )
        generation = self._generation
        try:
            if not await self._service.create(conversation):
                raise SyncServiceError("Failed to create conversation in database")
        except Exception as exc:
            self._record_failure(exc, "Failed to create conversation", generation=generation)
            raise

        if self._is_stale(generation, "create_conversation"):
            return conversation
        await self.load()
        if self._is_stale(generation, "create_conversation"):
            return conversation
        created = self.get_conversation_with_user(other_user_id)
        if created is None:
            exc = SyncConsistencyError("Failed to retrieve created conversation")
            self._record_failure(exc, "Failed to create conversation")
            raise exc
        return created

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def unread_count(self, conv_id: str) -> int:
        user_id = self.user_id
        if not conv_id or not user_id:
            return 0
        return conversation_unread_count(self._snapshot.entities, conv_id, user_id)

    def total_unread_count(self) -> int:
        user_id = self.user_id
        if not user_id:
            return 0
        return total_unread_count(self._snapshot.entities, user_id)

    def __repr__(self) -> str:
        return f"ConversationSyncStore(user_id={self.user_id!r}, conversations={len(self._snapshot.entities)})"
