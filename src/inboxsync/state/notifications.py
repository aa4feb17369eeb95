"""Notification store with push subscription and optimistic updates."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from inboxsync.exceptions import SyncValidationError
from inboxsync.ingestion.records import normalize_notifications
from inboxsync.models.notification import Notification, NotificationDraft
from inboxsync.services import NotificationService
from inboxsync.state.events import IngestionSource, StorePhase
from inboxsync.state.store import SyncStore, error_message
from inboxsync.state.subscription import SubscriptionSlot
from inboxsync.state.views import notifications_by_type, unread_notification_count

_logger = logging.getLogger(__name__)


class NotificationSyncStore(SyncStore[Notification]):
    """Notification list for one user, kept current by a push subscription.

    Usage::

        async with NotificationSyncStore(service) as store:
            await store.set_user("alice")
            await store.mark_as_read(store.notifications[0].id)
    """

    def __init__(self, service: NotificationService, *, logger: logging.Logger | None = None) -> None:
        super().__init__(logger=logger or _logger)
        self._service = service
        self._subscription = SubscriptionSlot(logger=self._logger)

    @property
    def notifications(self) -> list[Notification]:
        return self._entities()

    @property
    def subscribed(self) -> bool:
        return self._subscription.active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def set_user(self, user_id: str | None) -> None:
        """Switch to *user_id*: cancel the old subscription and open a new one.

        An empty user id leaves the store live with an empty list.
        """
        generation = self._begin_user(user_id)
        await self._subscription.cancel()
        user = self.user_id
        if user is None or not self._is_current(generation):
            return
        await self._subscribe(generation, user)

    async def _teardown(self) -> None:
        await self._subscription.cancel()

    async def _subscribe(self, generation: int, user_id: str) -> None:
        self._logger.debug("Setting up notifications listener for user=%s", user_id)
        try:
            handle = await self._service.subscribe(user_id, functools.partial(self._on_push, generation))
        except Exception:
            self._logger.warning("Error setting up notifications listener; falling back to load", exc_info=True)
            if not self._is_current(generation):
                return
            self._update(error="Failed to set up notifications listener", is_loading=False)
            await self.load()
            return

        if not self._is_current(generation):
            # User changed (or store closed) while the subscription was opening.
            await SubscriptionSlot.cancel_quietly(handle, logger=self._logger)
            return
        await self._subscription.replace(handle)
        if self._is_current(generation) and self.phase == StorePhase.LOADING:
            self._update(phase=StorePhase.LIVE)

    def _on_push(self, generation: int, batch: Any) -> None:
        if not self._is_current(generation):
            self._logger.debug("Ignoring push delivery from a cancelled subscription")
            return
        try:
            notifications = normalize_notifications(batch)
        except Exception:
            self._logger.error("Error processing notifications", exc_info=True)
            self._update(entities=(), error="Error processing notifications", is_loading=False)
            return
        self._logger.debug("Notifications received: %d", len(notifications))
        self._update(
            entities=notifications,
            is_loading=False,
            error=None,
            source=IngestionSource.PUSH,
            phase=StorePhase.LIVE,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """One-shot fetch replacing the whole list.

        Failure empties the list and records the error; it is not raised.
        """
        user_id = self.user_id
        if user_id is None:
            self._update(entities=(), is_loading=False)
            return

        generation = self._generation
        self._update(is_loading=True, error=None)
        try:
            raw = await self._service.get_all(user_id)
        except Exception as exc:
            self._logger.warning("Error loading notifications", exc_info=True)
            if self._is_current(generation):
                self._update(
                    entities=(),
                    error=error_message(exc, "Failed to load notifications"),
                    is_loading=False,
                    phase=StorePhase.LIVE,
                )
            return

        if not self._is_current(generation):
            return
        self._update(
            entities=normalize_notifications(raw),
            is_loading=False,
            source=IngestionSource.RELOAD,
            phase=StorePhase.LIVE,
        )

    async def refresh(self) -> None:
        await self.load()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def mark_as_read(self, notification_id: str) -> None:
        generation = self._generation
        try:
            await self._service.mark_as_read(notification_id)
        except Exception as exc:
            self._record_failure(exc, "Failed to mark notification as read", generation=generation)
            raise

        if self._is_stale(generation, "mark_as_read"):
            return
        self._update(
            entities=[n.mark_read() if n.id == notification_id else n for n in self._snapshot.entities],
            source=IngestionSource.OPTIMISTIC,
        )

    async def mark_all_as_read(self) -> None:
        """Mark every unread notification, then flip the local flags together.

        The remote calls run concurrently and all of them settle before the
        local patch. If any fails nothing is patched locally, although the
        calls that succeeded stay applied remotely.
        """
        if self.user_id is None:
            return

        unread = [n for n in self._snapshot.entities if not n.read]
        if not unread:
            return

        generation = self._generation
        results = await asyncio.gather(
            *(self._service.mark_as_read(n.id) for n in unread),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            self._logger.warning(
                "%d of %d mark-as-read calls failed; remote state may be partially updated",
                len(failures),
                len(unread),
            )
            self._record_failure(failures[0], "Failed to mark all notifications as read", generation=generation)
            raise failures[0]

        if self._is_stale(generation, "mark_all_as_read"):
            return
        marked = {n.id for n in unread}
        self._update(
            entities=[n.mark_read() if n.id in marked else n for n in self._snapshot.entities],
            source=IngestionSource.OPTIMISTIC,
        )

    async def delete_notification(self, notification_id: str) -> None:
        generation = self._generation
        try:
            await self._service.delete(notification_id)
        except Exception as exc:
            self._record_failure(exc, "Failed to delete notification", generation=generation)
            raise

        if self._is_stale(generation, "delete_notification"):
            return
        self._update(
            entities=[n for n in self._snapshot.entities if n.id != notification_id],
            source=IngestionSource.OPTIMISTIC,
        )

    async def clear_all_notifications(self) -> None:
        user_id = self.user_id
        if user_id is None:
            return
        generation = self._generation
        try:
            await self._service.clear_all(user_id)
        except Exception as exc:
            self._record_failure(exc, "Failed to clear all notifications", generation=generation)
            raise

        if self._is_stale(generation, "clear_all_notifications"):
            return
        self._update(entities=(), source=IngestionSource.OPTIMISTIC)

    async def create_notification(self, draft: NotificationDraft | Mapping[str, Any]) -> Notification:
        """Create a notification remotely.

        Nothing is inserted locally; the push subscription delivers the new
        record, so inserting here would duplicate it.
        """
        if not isinstance(draft, NotificationDraft):
            try:
                draft = NotificationDraft.model_validate(dict(draft))
            except ValidationError as exc:
                raise SyncValidationError(f"Invalid notification: {exc.errors(include_url=False)}") from exc

        notification = draft.to_notification()
        generation = self._generation
        try:
            await self._service.create(notification)
        except Exception as exc:
            self._record_failure(exc, "Failed to create notification", generation=generation)
            raise
        return notification

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def unread_count(self) -> int:
        return unread_notification_count(self._snapshot.entities)

    def by_type(self, notification_type: str) -> list[Notification]:
        return notifications_by_type(self._snapshot.entities, notification_type)
