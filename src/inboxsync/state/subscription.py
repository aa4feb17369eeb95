"""Holder for the single push subscription a store may own."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from inboxsync.exceptions import SyncSubscriptionError
from inboxsync.services import Subscription, SubscriptionHandle

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallbackSubscription:
    """Adapts a bare unsubscribe callable to :class:`Subscription`."""

    unsubscribe: Callable[[], Any]

    def cancel(self) -> None:
        self.unsubscribe()


def as_subscription(handle: SubscriptionHandle) -> Subscription:
    cancel = getattr(handle, "cancel", None)
    if callable(cancel):
        return handle  # type: ignore[return-value]
    if callable(handle):
        return CallbackSubscription(handle)
    raise SyncSubscriptionError(f"subscribe() returned an unusable handle: {handle!r}")


class SubscriptionSlot:
    """Owns at most one live subscription.

    Installing a new handle cancels the previous one first. ``cancel()`` on a
    handle may block (the MQTT channel joins its network thread), so it runs
    in the default executor. Cancellation failures are logged and never
    propagate.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger
        self._current: Subscription | None = None

    @property
    def active(self) -> bool:
        return self._current is not None

    async def replace(self, handle: SubscriptionHandle) -> None:
        subscription = as_subscription(handle)
        previous = self._current
        self._current = subscription
        if previous is not None:
            await self.cancel_quietly(previous, logger=self._logger)

    async def cancel(self) -> None:
        current = self._current
        self._current = None
        if current is None:
            return
        await self.cancel_quietly(current, logger=self._logger)

    @staticmethod
    async def cancel_quietly(handle: SubscriptionHandle, *, logger: logging.Logger | None = None) -> None:
        log = logger or _logger
        try:
            subscription = as_subscription(handle)
            await asyncio.get_running_loop().run_in_executor(None, subscription.cancel)
        except Exception:
            log.error("Error cancelling push subscription", exc_info=True)
