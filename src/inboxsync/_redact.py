"""Redaction of REST and push payloads before they reach DEBUG logs.

Credentials and contact details are replaced outright. Message and
notification bodies are reduced to their length, so a trace still shows
whether a body was present without leaking what users wrote.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {"password", "token", "apitoken", "accesstoken", "refreshtoken", "authorization", "cookie"}
)
_CONTACT_KEYS: frozenset[str] = frozenset({"email", "phone"})
# Message.content and Notification.message carry user-written text.
_BODY_KEYS: frozenset[str] = frozenset({"content", "message"})


def _field_key(key: Any) -> str:
    # api_token, apiToken and Api-Token all compare equal.
    return str(key).lower().replace("_", "").replace("-", "")


def _redact_field(key: str, value: Any, max_string: int) -> Any:
    if key in _CREDENTIAL_KEYS or key in _CONTACT_KEYS:
        return REDACTED
    if key in _BODY_KEYS and isinstance(value, str):
        return f"<{len(value)} chars>"
    return redact_for_log(value, max_string=max_string)


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of a decoded JSON payload that is safe to log."""
    if isinstance(value, Mapping):
        return {str(k): _redact_field(_field_key(k), v, max_string) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}...<{len(value)} chars>"
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return f"<{type(value).__name__}>"
