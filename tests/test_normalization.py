from __future__ import annotations

from datetime import UTC, datetime

import pytest

from inboxsync.ingestion.normalize import (
    as_sequence,
    coerce_timestamp_string,
    parse_timestamp,
    timestamp_sort_key,
    utc_now_iso,
)
from inboxsync.ingestion.records import (
    normalize_conversation,
    normalize_conversations,
    normalize_messages,
    normalize_notification,
    normalize_notifications,
    normalize_users,
)
from inboxsync.models.notification import Notification

# ------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------


class TestNotificationNormalization:
    def test_incomplete_records_are_dropped_and_defaults_applied(self) -> None:
        batch = [{"id": "1", "userId": "u", "type": "t"}, {"foo": "bar"}]

        result = normalize_notifications(batch)

        assert len(result) == 1
        assert result[0].id == "1"
        assert result[0].read is False
        assert result[0].created_at
        assert parse_timestamp(result[0].created_at) is not None

    @pytest.mark.parametrize("missing", ["id", "userId", "type"])
    def test_missing_identifier_rejects(self, missing: str) -> None:
        raw = {"id": "1", "userId": "u", "type": "t"}
        raw[missing] = ""

        assert normalize_notification(raw) is None

    @pytest.mark.parametrize("batch", [None, {"id": "1"}, "not-a-list", 42])
    def test_non_sequence_batch_is_empty(self, batch: object) -> None:
        assert normalize_notifications(batch) == []

    def test_read_is_coerced_to_bool(self) -> None:
        truthy = normalize_notification({"id": "1", "userId": "u", "type": "t", "read": 1})
        falsy = normalize_notification({"id": "2", "userId": "u", "type": "t", "read": ""})

        assert truthy is not None and truthy.read is True
        assert falsy is not None and falsy.read is False

    def test_message_defaults_and_data_preserved(self) -> None:
        payload = {"senderId": "bob", "nested": {"k": [1, 2]}}
        result = normalize_notification(
            {"id": "1", "userId": "u", "type": "message", "message": None, "data": payload}
        )

        assert result is not None
        assert result.message == ""
        assert result.data == payload

    def test_existing_created_at_is_kept(self) -> None:
        result = normalize_notification(
            {"id": "1", "userId": "u", "type": "t", "createdAt": "2026-01-01T00:00:00.000Z"}
        )

        assert result is not None
        assert result.created_at == "2026-01-01T00:00:00.000Z"

    def test_datetime_created_at_becomes_iso_string(self) -> None:
        result = normalize_notification(
            {"id": "1", "userId": "u", "type": "t", "createdAt": datetime(2026, 1, 1, tzinfo=UTC)}
        )

        assert result is not None
        assert result.created_at == "2026-01-01T00:00:00.000Z"

    def test_model_instances_pass_through(self) -> None:
        notification = Notification(id="1", user_id="u", type="t")

        assert normalize_notifications([notification]) == [notification]


# ------------------------------------------------------------------
# Conversations / messages
# ------------------------------------------------------------------


class TestConversationNormalization:
    def test_missing_messages_default_to_empty(self) -> None:
        result = normalize_conversation({"id": "a-b", "participants": ["a", "b"]})

        assert result is not None
        assert result.messages == []

    def test_non_list_messages_default_to_empty(self) -> None:
        result = normalize_conversation({"id": "a-b", "participants": ["a", "b"], "messages": {"x": 1}})

        assert result is not None
        assert result.messages == []

    def test_malformed_and_blank_messages_are_dropped(self) -> None:
        result = normalize_conversation(
            {
                "id": "a-b",
                "participants": ["a", "b"],
                "messages": [
                    {"id": "m1", "senderId": "a", "receiverId": "b", "content": "hi", "read": 0},
                    "garbage",
                    {"content": "no id"},
                    {"id": "m2", "senderId": "a", "receiverId": "b", "content": "   "},
                    {"id": "m3", "senderId": "a", "receiverId": "b"},
                ],
            }
        )

        assert result is not None
        assert [m.id for m in result.messages] == ["m1"]
        assert result.messages[0].read is False

    def test_conversation_without_id_is_dropped(self) -> None:
        assert normalize_conversations([{"participants": ["a", "b"]}, {"id": "a-b"}])[0].id == "a-b"
        assert len(normalize_conversations([{"participants": ["a", "b"]}])) == 0

    def test_non_list_participants_become_empty(self) -> None:
        result = normalize_conversation({"id": "a-b", "participants": "a,b"})

        assert result is not None
        assert result.participants == []

    def test_normalize_messages_batch(self) -> None:
        result = normalize_messages([{"id": "m1", "content": "hi", "timestamp": 1_770_000_000_000}, None])

        assert len(result) == 1
        assert result[0].timestamp.endswith("Z")

    def test_normalize_users_drops_entries_without_id(self) -> None:
        users = normalize_users([{"id": "alice", "fullName": "Alice A"}, {"fullName": "Ghost"}, None])

        assert [(u.id, u.full_name) for u in users] == [("alice", "Alice A")]


# ------------------------------------------------------------------
# Scalar helpers
# ------------------------------------------------------------------


class TestTimestamps:
    def test_sort_key_for_iso_string(self) -> None:
        expected = datetime(2026, 1, 2, tzinfo=UTC).timestamp() * 1000.0

        assert timestamp_sort_key("2026-01-02T00:00:00.000Z") == expected

    @pytest.mark.parametrize("value", [None, "", "not-a-date", object(), True])
    def test_sort_key_for_invalid_is_epoch_zero(self, value: object) -> None:
        assert timestamp_sort_key(value) == 0.0

    def test_seconds_and_milliseconds_agree(self) -> None:
        assert timestamp_sort_key(1_770_928_447) == timestamp_sort_key(1_770_928_447_000)

    def test_unknown_string_format_is_kept_verbatim(self) -> None:
        assert coerce_timestamp_string("yesterday") == "yesterday"
        assert coerce_timestamp_string("   ") is None

    def test_utc_now_iso_format(self) -> None:
        value = utc_now_iso()

        assert value.endswith("Z")
        assert parse_timestamp(value) is not None

    def test_as_sequence(self) -> None:
        assert as_sequence((1, 2)) == [1, 2]
        assert as_sequence(None) == []
