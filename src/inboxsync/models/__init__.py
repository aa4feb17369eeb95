"""Record models for notifications and conversations."""

from inboxsync.models._base import SyncBaseModel
from inboxsync.models.conversation import Conversation, Message
from inboxsync.models.notification import Notification, NotificationDraft
from inboxsync.models.user import User

__all__ = [
    "Conversation",
    "Message",
    "Notification",
    "NotificationDraft",
    "SyncBaseModel",
    "User",
]
