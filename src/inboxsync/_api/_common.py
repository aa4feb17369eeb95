"""Shared helpers for the REST endpoint modules.

Internal to inboxsync and may change at any time.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from inboxsync._transport import Transport
from inboxsync.exceptions import SyncApiError


def path(*segments: str) -> str:
    """Build an endpoint path with each segment URL-quoted."""
    return "".join(f"/{quote(str(segment), safe='')}" for segment in segments)


def unwrap_list(decoded: Any, key: str) -> Any:
    """Accept either a bare JSON list or ``{key: [...]}``.

    Anything else is passed through; the stores treat non-lists as empty.
    """
    if isinstance(decoded, dict) and key in decoded:
        return decoded[key]
    return decoded


async def request_ok(transport: Transport, method: str, endpoint: str, payload: Any | None = None) -> bool:
    """Run a request whose outcome is reported as a bool.

    HTTP 404 maps to ``False``; other failures raise.
    """
    try:
        decoded = await transport.request(method, endpoint, payload)
    except SyncApiError as exc:
        if exc.status_code == 404:
            return False
        raise
    if isinstance(decoded, dict) and isinstance(decoded.get("ok"), bool):
        return bool(decoded["ok"])
    return True
