"""Per-user store state shared by the notification and conversation stores.

A store owns one immutable :class:`StoreSnapshot` at a time. Every write
replaces the snapshot wholesale; the most recently applied write wins.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from inboxsync.exceptions import InboxSyncError
from inboxsync.models._base import SyncBaseModel
from inboxsync.state.events import IngestionSource, StorePhase

_logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=SyncBaseModel)

Listener = Callable[["StoreSnapshot[Any]"], None]


class StoreSnapshot(BaseModel, Generic[TEntity]):
    """Immutable view of a store at one point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str | None = None
    entities: tuple[TEntity, ...] = ()
    is_loading: bool = False
    error: str | None = None
    source: IngestionSource | None = None
    """Path that last wrote ``entities``."""
    phase: StorePhase = StorePhase.UNINITIALIZED


def error_message(exc: BaseException, default: str) -> str:
    text = str(exc).strip()
    return text or default


class SyncStore(ABC, Generic[TEntity]):
    """Lifecycle, state replacement and listener plumbing for a sync store.

    State is keyed by the current user id: switching users bumps an internal
    generation counter so results of I/O started for the previous user are
    discarded instead of being written into the new user's state.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger
        self._generation = 0
        self._snapshot: StoreSnapshot[TEntity] = StoreSnapshot()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoreSnapshot[TEntity]:
        return self._snapshot

    @property
    def user_id(self) -> str | None:
        return self._snapshot.user_id

    @property
    def is_loading(self) -> bool:
        return self._snapshot.is_loading

    @property
    def error(self) -> str | None:
        return self._snapshot.error

    @property
    def phase(self) -> StorePhase:
        return self._snapshot.phase

    @property
    def closed(self) -> bool:
        return self._snapshot.phase == StorePhase.DISPOSED

    def _entities(self) -> list[TEntity]:
        return list(self._snapshot.entities)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new snapshot after every state change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        snapshot = self._snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self._logger.warning("Store listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # State replacement
    # ------------------------------------------------------------------

    def _update(self, **changes: Any) -> None:
        if self.closed:
            self._logger.debug("Ignoring state update on closed store: %s", sorted(changes))
            return
        if "entities" in changes:
            changes["entities"] = tuple(changes["entities"])
        self._snapshot = self._snapshot.model_copy(update=changes)
        self._notify()

    def _begin_user(self, user_id: str | None) -> int:
        """Reset state for *user_id* and return the new generation."""
        if self.closed:
            raise InboxSyncError("Store is closed")
        self._generation += 1
        user = user_id or None
        self._snapshot = StoreSnapshot(
            user_id=user,
            is_loading=user is not None,
            phase=StorePhase.LOADING if user is not None else StorePhase.LIVE,
        )
        self._notify()
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self.closed

    def _record_failure(self, exc: BaseException, default: str, *, generation: int | None = None) -> None:
        """Log *exc* and store it as the error of the current user.

        With *generation*, the error is only stored if the user has not
        changed since that generation was captured.
        """
        self._logger.error("%s: %s", default, exc, exc_info=exc)
        if generation is not None and not self._is_current(generation):
            self._logger.debug("Discarding error from a previous user: %s", default)
            return
        self._update(error=error_message(exc, default))

    def _is_stale(self, generation: int, action: str) -> bool:
        if self._is_current(generation):
            return False
        self._logger.debug("User changed during %s; local state left untouched", action)
        return True

    def clear_error(self) -> None:
        if self._snapshot.error is not None:
            self._update(error=None)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def set_user(self, user_id: str | None) -> None:
        """Re-key the store to *user_id* and start syncing it."""

    async def _teardown(self) -> None:
        """Release per-user resources; overridden by stores that hold any."""

    async def close(self) -> None:
        """Dispose the store; no further state updates are applied."""
        if self.closed:
            return
        self._generation += 1
        self._snapshot = self._snapshot.model_copy(update={"phase": StorePhase.DISPOSED, "is_loading": False})
        self._notify()
        self._listeners.clear()
        await self._teardown()

    async def __aenter__(self) -> SyncStore[TEntity]:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
