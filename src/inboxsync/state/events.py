"""Where a store's entity list came from, and where a store is in its lifecycle."""

from __future__ import annotations

from enum import StrEnum


class IngestionSource(StrEnum):
    RELOAD = "reload"
    PUSH = "push"
    OPTIMISTIC = "optimistic"


class StorePhase(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LIVE = "live"
    DISPOSED = "disposed"
