"""Unit tests for the state data models."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from chatsync.state.models import (
    Attachment,
    ChatReply,
    Message,
    MessageRole,
    ModelInfo,
    Session,
)


class TestSession:
    """Tests for Session model."""

    def test_parse_iso_timestamps(self):
        """Test that ISO-8601 strings are parsed as aware datetimes."""
        session = Session.model_validate({
            "session_id": "s1",
            "title": "Trip",
            "created_at": "2024-05-01T10:00:00Z",
            "updated_at": "2024-05-01T11:30:00+00:00",
        })

        assert session.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert session.updated_at == datetime(2024, 5, 1, 11, 30, tzinfo=timezone.utc)

    def test_naive_timestamps_are_utc(self):
        """Test that timestamps without offset are taken as UTC."""
        session = Session(session_id="s1", created_at=datetime(2024, 5, 1, 10, 0))

        assert session.created_at.tzinfo == timezone.utc

    def test_missing_updated_at_defaults_to_created_at(self):
        session = Session.model_validate({"session_id": "s1", "created_at": "2024-05-01T10:00:00Z"})

        assert session.updated_at == session.created_at
        assert session.title is None


class TestMessage:
    """Tests for Message model."""

    def test_attachments_accept_ids_and_objects(self):
        """Test that attachments may be bare ids or described objects."""
        message = Message.model_validate({
            "id": "m1",
            "role": "user",
            "content": "see files",
            "attachments": ["att-1", {"id": "att-2", "filename": "a.pdf", "size_bytes": 10}],
            "created_at": "2024-05-01T10:00:00Z",
        })

        assert [a.id for a in message.attachments] == ["att-1", "att-2"]
        assert message.attachments[0].label == "att-1"
        assert message.attachments[1].label == "a.pdf (10 bytes)"

    def test_null_attachments_become_empty(self):
        message = Message.model_validate({"id": "m1", "role": "assistant", "attachments": None})

        assert message.attachments == []
        assert message.content == ""

    def test_null_created_at_uses_receipt_time(self):
        """Test that a reply with created_at null still parses."""
        reply = ChatReply.model_validate({
            "session_id": "s1",
            "message": {"id": "m2", "role": "assistant", "content": "Hi!", "created_at": None},
        })

        assert reply.message.created_at.tzinfo == timezone.utc
        assert reply.message.content == "Hi!"

    def test_unknown_role_fails(self):
        with pytest.raises(ValidationError):
            Message(id="m1", role="system", content="hi")

    def test_local_id_kinds(self):
        assert Message(id="temp_1", role=MessageRole.USER).is_provisional
        assert Message(id="err_1", role=MessageRole.ASSISTANT).is_error
        server = Message(id="m1", role=MessageRole.ASSISTANT)
        assert not server.is_provisional
        assert not server.is_error


class TestWireModels:
    """Tests for request/response shapes."""

    def test_chat_reply_requires_message(self):
        with pytest.raises(ValidationError):
            ChatReply.model_validate({"session_id": "s1"})

    def test_model_info_availability(self):
        assert ModelInfo(name="a").available
        assert not ModelInfo(name="a", status="degraded").available

    def test_attachment_negative_size_fails(self):
        with pytest.raises(ValidationError):
            Attachment(id="a", size_bytes=-1)
