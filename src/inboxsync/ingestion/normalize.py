"""Normalization helpers.

Centralizes defensive parsing of scalar values coming from untrusted
remote records. Nothing here knows about the record models.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

# Threshold to distinguish epoch seconds from milliseconds.
_MS_THRESHOLD = 1e11


def safe_str(value: Any) -> str | None:
    """Return ``str(value)`` unless it is missing or blank."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def coerce_bool(value: Any) -> bool:
    return bool(value)


def as_sequence(value: Any) -> list[Any]:
    """Treat anything that is not a list/tuple as an empty batch."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return format_timestamp(datetime.now(UTC))


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _epoch_to_datetime(value: float) -> datetime | None:
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return None
    if value > _MS_THRESHOLD:
        value /= 1000.0
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO string, datetime or epoch (s or ms) into an aware datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)):
        return _epoch_to_datetime(float(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _epoch_to_datetime(float(text))
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return None


def coerce_timestamp_string(value: Any) -> str | None:
    """Normalize a remote timestamp to a string.

    Strings are kept as received (they may be in a format we cannot parse,
    and ordering treats those as epoch 0). Datetimes and epoch numbers are
    rendered as ISO strings. Anything else is treated as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return format_timestamp(parsed)


def timestamp_sort_key(value: Any) -> float:
    """Epoch milliseconds for ordering; unparseable or missing values sort as 0."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp() * 1000.0
