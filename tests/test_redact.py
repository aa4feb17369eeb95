from __future__ import annotations

from inboxsync._redact import REDACTED, redact_for_log


def test_credentials_and_contact_details_are_redacted() -> None:
    payload = {
        "id": "1",
        "api_token": "ABCDEF",
        "Authorization": "Bearer x",
        "refresh-token": "r",
        "password": "pw",
        "users": [{"id": "alice", "fullName": "Alice", "email": "a@example.com"}],
    }

    redacted = redact_for_log(payload)

    assert redacted["id"] == "1"
    assert redacted["api_token"] == REDACTED
    assert redacted["Authorization"] == REDACTED
    assert redacted["refresh-token"] == REDACTED
    assert redacted["password"] == REDACTED
    assert redacted["users"] == [{"id": "alice", "fullName": "Alice", "email": REDACTED}]


def test_message_and_notification_bodies_are_reduced_to_length() -> None:
    payload = {
        "id": "m1",
        "content": "see you at noon",
        "notification": {"title": "New Message", "message": "Alice sent you a message", "read": False},
    }

    redacted = redact_for_log(payload)

    assert redacted["content"] == "<15 chars>"
    assert redacted["notification"] == {"title": "New Message", "message": "<24 chars>", "read": False}


def test_long_strings_are_truncated_and_objects_hidden() -> None:
    redacted = redact_for_log({"value": "x" * 600, "when": object()}, max_string=10)

    assert redacted["value"] == "x" * 10 + "...<600 chars>"
    assert redacted["when"] == "<object>"
