"""Base model for inboxsync records.

Every record model inherits from :class:`SyncBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys used by the remote
  services map automatically to snake_case fields.
* ``extra="ignore"`` so unknown remote fields never break parsing.
* ``frozen=True``; state changes replace records via ``model_copy``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from inboxsync.ingestion.normalize import safe_str


def require_text(value: Any, field_name: str) -> str:
    """Validator helper: reject missing or blank identifiers."""
    text = safe_str(value)
    if text is None:
        raise ValueError(f"{field_name} must be non-empty")
    return text


def text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class SyncBaseModel(BaseModel):
    """Base for records exchanged with the remote services."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
