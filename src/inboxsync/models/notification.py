"""Notification models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from inboxsync.identity import generate_id
from inboxsync.ingestion.normalize import coerce_bool, coerce_timestamp_string, utc_now_iso
from inboxsync.models._base import SyncBaseModel, require_text, text_or_empty


class Notification(SyncBaseModel):
    """A notification addressed to one user."""

    id: str
    """Record id."""
    user_id: str
    """Recipient user id."""
    type: str
    """Free-form category (e.g. ``"message"``)."""
    title: str = ""
    message: str = ""
    data: Any = None
    """Arbitrary structured payload, preserved unchanged."""
    read: bool = False
    created_at: str = Field(default_factory=utc_now_iso)
    """ISO-8601 timestamp string; defaulted to now when absent."""

    @field_validator("id", "user_id", "type", mode="before")
    @classmethod
    def _require_identifiers(cls, value: Any, info: ValidationInfo) -> str:
        return require_text(value, info.field_name or "value")

    @field_validator("title", "message", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return text_or_empty(value)

    @field_validator("read", mode="before")
    @classmethod
    def _coerce_read(cls, value: Any) -> bool:
        return coerce_bool(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _default_created_at(cls, value: Any) -> str:
        return coerce_timestamp_string(value) or utc_now_iso()

    def mark_read(self) -> Notification:
        if self.read:
            return self
        return self.model_copy(update={"read": True})


class NotificationDraft(SyncBaseModel):
    """A notification before the id and creation time are assigned."""

    user_id: str
    type: str
    title: str = ""
    message: str = ""
    data: Any = None
    read: bool = False

    @field_validator("user_id", "type", mode="before")
    @classmethod
    def _require_identifiers(cls, value: Any, info: ValidationInfo) -> str:
        return require_text(value, info.field_name or "value")

    @field_validator("title", "message", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return text_or_empty(value)

    @field_validator("read", mode="before")
    @classmethod
    def _coerce_read(cls, value: Any) -> bool:
        return coerce_bool(value)

    def to_notification(self, *, notification_id: str | None = None, created_at: str | None = None) -> Notification:
        return Notification(
            id=notification_id or generate_id(),
            user_id=self.user_id,
            type=self.type,
            title=self.title,
            message=self.message,
            data=self.data,
            read=self.read,
            created_at=created_at or utc_now_iso(),
        )
