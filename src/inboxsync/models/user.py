"""User directory entry."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from inboxsync.models._base import SyncBaseModel, require_text, text_or_empty


class User(SyncBaseModel):
    """Directory entry; only used to resolve display names."""

    id: str
    full_name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _require_id(cls, value: Any) -> str:
        return require_text(value, "id")

    @field_validator("full_name", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return text_or_empty(value)
