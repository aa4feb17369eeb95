"""Deterministic identifiers."""

from __future__ import annotations

import secrets
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def conversation_id(user_a: str, user_b: str) -> str:
    """Return the id of the conversation between two users.

    Symmetric: ``conversation_id(a, b) == conversation_id(b, a)``, so an
    unordered pair of users maps to exactly one conversation.
    """
    return "-".join(sorted((user_a, user_b)))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Client-side record id: random prefix plus base36 millisecond clock."""
    return secrets.token_hex(5) + _to_base36(int(time.time() * 1000))
