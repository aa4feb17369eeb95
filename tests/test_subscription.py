from __future__ import annotations

import logging
import threading

import pytest

from inboxsync.exceptions import SyncSubscriptionError
from inboxsync.state.subscription import SubscriptionSlot, as_subscription


class _ThreadRecordingSubscription:
    """Stands in for a handle whose cancel() joins a network thread."""

    def __init__(self, *, fail: bool = False) -> None:
        self.cancelled_on: list[int] = []
        self.fail = fail

    def cancel(self) -> None:
        self.cancelled_on.append(threading.get_ident())
        if self.fail:
            raise RuntimeError("broker unreachable")


@pytest.mark.asyncio
async def test_cancel_runs_off_the_event_loop_thread() -> None:
    slot = SubscriptionSlot()
    handle = _ThreadRecordingSubscription()
    await slot.replace(handle)
    assert slot.active is True

    await slot.cancel()

    assert slot.active is False
    assert len(handle.cancelled_on) == 1
    assert handle.cancelled_on[0] != threading.get_ident()


@pytest.mark.asyncio
async def test_replace_cancels_previous_handle() -> None:
    slot = SubscriptionSlot()
    first = _ThreadRecordingSubscription()
    second = _ThreadRecordingSubscription()

    await slot.replace(first)
    await slot.replace(second)

    assert len(first.cancelled_on) == 1
    assert second.cancelled_on == []
    assert slot.active is True


@pytest.mark.asyncio
async def test_cancel_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    slot = SubscriptionSlot()
    await slot.replace(_ThreadRecordingSubscription(fail=True))

    with caplog.at_level(logging.ERROR):
        await slot.cancel()
        await slot.cancel()

    assert caplog.text.count("Error cancelling push subscription") == 1
    assert slot.active is False


@pytest.mark.asyncio
async def test_bare_unsubscribe_callable_is_accepted() -> None:
    calls: list[str] = []
    slot = SubscriptionSlot()

    await slot.replace(lambda: calls.append("unsubscribed"))
    await slot.cancel()

    assert calls == ["unsubscribed"]


def test_unusable_handle_is_rejected() -> None:
    with pytest.raises(SyncSubscriptionError):
        as_subscription(42)  # type: ignore[arg-type]
