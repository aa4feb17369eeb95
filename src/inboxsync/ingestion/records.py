"""Record normalization.

Every inbound batch (initial load, push delivery, post-reload fetch) is run
through these functions. A malformed record is dropped or defaulted; it never
raises and never aborts the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from inboxsync._redact import redact_for_log
from inboxsync.ingestion.normalize import as_sequence
from inboxsync.models._base import SyncBaseModel
from inboxsync.models.conversation import Conversation, Message
from inboxsync.models.notification import Notification
from inboxsync.models.user import User

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=SyncBaseModel)


def _normalize_one(model_cls: type[TModel], raw: Any) -> TModel | None:
    if isinstance(raw, model_cls):
        return raw
    if isinstance(raw, SyncBaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        _logger.debug("Dropping non-object %s record: %r", model_cls.__name__, raw)
        return None
    try:
        return model_cls.model_validate(dict(raw))
    except ValidationError as exc:
        _logger.debug(
            "Dropping incomplete %s record %s: %s",
            model_cls.__name__,
            redact_for_log(dict(raw)),
            exc.errors(include_url=False),
        )
        return None


def _normalize_batch(model_cls: type[TModel], batch: Any) -> list[TModel]:
    records: list[TModel] = []
    for raw in as_sequence(batch):
        record = _normalize_one(model_cls, raw)
        if record is not None:
            records.append(record)
    return records


def normalize_notification(raw: Any) -> Notification | None:
    """Return a normalized notification, or ``None`` when id/userId/type is missing."""
    return _normalize_one(Notification, raw)


def normalize_notifications(batch: Any) -> list[Notification]:
    return _normalize_batch(Notification, batch)


def normalize_message(raw: Any) -> Message | None:
    return _normalize_one(Message, raw)


def normalize_messages(batch: Any) -> list[Message]:
    return _normalize_batch(Message, batch)


def normalize_conversation(raw: Any) -> Conversation | None:
    """Return a normalized conversation.

    A missing or non-list ``messages`` field becomes an empty list; only a
    missing id rejects the record.
    """
    return _normalize_one(Conversation, raw)


def normalize_conversations(batch: Any) -> list[Conversation]:
    return _normalize_batch(Conversation, batch)


def normalize_users(batch: Any) -> list[User]:
    return _normalize_batch(User, batch)
