"""State/store layer.

This package is the single source of truth for how reloads, push
deliveries and optimistic patches are combined into the per-user
notification and conversation views.
"""

from inboxsync.state.conversations import ConversationSyncStore
from inboxsync.state.events import IngestionSource, StorePhase
from inboxsync.state.notifications import NotificationSyncStore
from inboxsync.state.store import StoreSnapshot, SyncStore

__all__ = [
    "ConversationSyncStore",
    "IngestionSource",
    "NotificationSyncStore",
    "StorePhase",
    "StoreSnapshot",
    "SyncStore",
]
