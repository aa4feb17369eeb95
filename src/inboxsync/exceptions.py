"""Custom exception hierarchy for inboxsync."""

from __future__ import annotations


class InboxSyncError(Exception):
    """Base exception for all inboxsync errors."""


class SyncConfigError(InboxSyncError):
    """Invalid or missing configuration."""


class SyncValidationError(InboxSyncError, ValueError):
    """Bad arguments passed to a store operation.

    Raised synchronously, before any collaborator is called.
    """


class SyncServiceError(InboxSyncError):
    """A collaborator reported failure without raising (returned ``False``)."""


class SyncConsistencyError(InboxSyncError):
    """Remote state contradicts a just-completed operation.

    For example a conversation that cannot be found after the reload that
    follows its creation.
    """


class SyncTransportError(InboxSyncError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SyncApiError(SyncTransportError):
    """The remote API answered with a non-2xx status."""


class SyncSubscriptionError(InboxSyncError):
    """A push subscription could not be opened."""
