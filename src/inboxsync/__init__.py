"""inboxsync - client-side sync engine for notifications and conversations."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("inboxsync")
except PackageNotFoundError:
    __version__ = "0+local"
from inboxsync.client import SyncClient
from inboxsync.config import SyncConfig
from inboxsync.exceptions import (
    InboxSyncError,
    SyncApiError,
    SyncConfigError,
    SyncConsistencyError,
    SyncServiceError,
    SyncSubscriptionError,
    SyncTransportError,
    SyncValidationError,
)
from inboxsync.identity import conversation_id, generate_id
from inboxsync.models import Conversation, Message, Notification, NotificationDraft, User
from inboxsync.services import ConversationService, NotificationService, Subscription, UserDirectory
from inboxsync.state import (
    ConversationSyncStore,
    IngestionSource,
    NotificationSyncStore,
    StorePhase,
    StoreSnapshot,
)

__all__ = [
    "__version__",
    "Conversation",
    "ConversationService",
    "ConversationSyncStore",
    "InboxSyncError",
    "IngestionSource",
    "Message",
    "Notification",
    "NotificationDraft",
    "NotificationService",
    "NotificationSyncStore",
    "StorePhase",
    "StoreSnapshot",
    "Subscription",
    "SyncApiError",
    "SyncClient",
    "SyncConfig",
    "SyncConfigError",
    "SyncConsistencyError",
    "SyncServiceError",
    "SyncSubscriptionError",
    "SyncTransportError",
    "SyncValidationError",
    "User",
    "UserDirectory",
    "conversation_id",
    "generate_id",
]
