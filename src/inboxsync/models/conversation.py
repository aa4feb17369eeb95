"""Conversation and message models.

Messages are embedded in their conversation and never stored on their own.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, ValidationError, ValidationInfo, field_validator

from inboxsync.ingestion.normalize import as_sequence, coerce_bool, coerce_timestamp_string, safe_str
from inboxsync.models._base import SyncBaseModel, require_text, text_or_empty

_logger = logging.getLogger(__name__)


class Message(SyncBaseModel):
    """A single message between two users."""

    id: str
    sender_id: str = ""
    receiver_id: str = ""
    content: str
    timestamp: str = ""
    read: bool = False

    @field_validator("id", "content", mode="before")
    @classmethod
    def _require_text(cls, value: Any, info: ValidationInfo) -> str:
        return require_text(value, info.field_name or "value")

    @field_validator("sender_id", "receiver_id", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return text_or_empty(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> str:
        return coerce_timestamp_string(value) or ""

    @field_validator("read", mode="before")
    @classmethod
    def _coerce_read(cls, value: Any) -> bool:
        return coerce_bool(value)

    def is_unread_for(self, user_id: str) -> bool:
        return self.receiver_id == user_id and not self.read


class Conversation(SyncBaseModel):
    """A two-party conversation with its embedded messages."""

    id: str
    participants: list[str] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    updated_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _require_id(cls, value: Any) -> str:
        return require_text(value, "id")

    @field_validator("participants", mode="before")
    @classmethod
    def _clean_participants(cls, value: Any) -> list[str]:
        cleaned: list[str] = []
        for item in as_sequence(value):
            text = safe_str(item)
            if text is not None:
                cleaned.append(text)
        return cleaned

    @field_validator("messages", mode="before")
    @classmethod
    def _clean_messages(cls, value: Any) -> list[Any]:
        kept: list[Any] = []
        for item in as_sequence(value):
            if isinstance(item, Message):
                kept.append(item)
                continue
            try:
                kept.append(Message.model_validate(item))
            except ValidationError:
                _logger.debug("Dropping malformed message: %r", item)
        return kept

    @field_validator("updated_at", mode="before")
    @classmethod
    def _coerce_updated_at(cls, value: Any) -> str | None:
        return coerce_timestamp_string(value)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def unread_count_for(self, user_id: str) -> int:
        return sum(1 for message in self.messages if message.is_unread_for(user_id))
