"""Derived views over store state.

Pure functions over the current entity lists; none of them perform I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from inboxsync.identity import conversation_id
from inboxsync.models.conversation import Conversation
from inboxsync.models.notification import Notification


def unread_notification_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for notification in notifications if not notification.read)


def notifications_by_type(notifications: Iterable[Notification], notification_type: str) -> list[Notification]:
    return [notification for notification in notifications if notification.type == notification_type]


def find_conversation(conversations: Iterable[Conversation], conv_id: str) -> Conversation | None:
    return next((conv for conv in conversations if conv.id == conv_id), None)


def find_conversation_between(
    conversations: Iterable[Conversation],
    user_id: str,
    other_user_id: str,
) -> Conversation | None:
    """Look up a conversation by its derived id."""
    return find_conversation(conversations, conversation_id(user_id, other_user_id))


def find_conversation_with_participant(
    conversations: Iterable[Conversation],
    user_id: str,
    participant_id: str,
) -> Conversation | None:
    """First conversation whose participants include both users."""
    for conv in conversations:
        if conv.has_participant(participant_id) and conv.has_participant(user_id):
            return conv
    return None


def conversation_unread_count(conversations: Sequence[Conversation], conv_id: str, user_id: str) -> int:
    """Messages addressed to *user_id* and still unread in one conversation."""
    conv = find_conversation(conversations, conv_id)
    if conv is None:
        return 0
    return conv.unread_count_for(user_id)


def total_unread_count(conversations: Sequence[Conversation], user_id: str) -> int:
    # Summed by id so the total always equals the per-conversation counts.
    return sum(conversation_unread_count(conversations, conv.id, user_id) for conv in conversations)
