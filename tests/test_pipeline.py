"""Unit tests for the optimistic send pipeline."""
import asyncio

import pytest

from chatsync.api import ApiStatusError, MalformedResponseError, RequestTimeoutError
from chatsync.client import ChatClient
from chatsync.state import PipelineState, SendStatus
from chatsync.state.models import ChatReply, Message, MessageRole

from conftest import assistant


async def _until_loading(client: ChatClient) -> None:
    for _ in range(10):
        if client.loading:
            return
        await asyncio.sleep(0)
    raise AssertionError("send never started")


class TestSendSuccess:
    """Tests for sends the backend accepts."""

    @pytest.mark.asyncio
    async def test_hello_on_new_session(self, client, backend):
        """Test the first message of a new chat with a selected model."""
        backend.replies = [
            ChatReply(
                session_id="s1",
                message=Message(id="m2", role=MessageRole.ASSISTANT, content="Hi!"),
            )
        ]
        await client.bootstrap()

        outcome = await client.send("Hello")

        assert outcome.status == SendStatus.SUCCESS
        assert outcome.session_id == "s1"
        assert outcome.delivered
        assert [(m.role, m.content) for m in client.messages] == [
            (MessageRole.USER, "Hello"),
            (MessageRole.ASSISTANT, "Hi!"),
        ]
        assert client.messages[0].is_provisional
        assert client.messages[1].id == "m2"
        first = client.sessions.sessions[0]
        assert first.session_id == "s1"
        assert first.title == "Hello"
        assert client.current_session_id == "s1"
        assert backend.payloads[0].model == "gpt-x"
        assert backend.payloads[0].session_id is None
        assert not client.loading

    @pytest.mark.asyncio
    async def test_new_session_adds_one_session_two_messages(self, client, backend, sample_sessions):
        backend.sessions = sample_sessions
        await client.bootstrap()

        await client.send("Plan a trip")

        assert len(client.sessions.sessions) == len(sample_sessions) + 1
        assert len(client.messages) == 2
        assert client.sessions.sessions[0].session_id == "s-created"
        assert client.sessions.get("s-created").title == "Plan a trip"

    @pytest.mark.asyncio
    async def test_existing_session_moves_first_keeping_title(self, client, backend, sample_sessions):
        backend.sessions = sample_sessions
        backend.histories["s-old"] = [Message(id="m1", role=MessageRole.USER, content="earlier")]
        await client.bootstrap()
        await client.select_session("s-old")

        outcome = await client.send("again")

        assert backend.payloads[0].session_id == "s-old"
        assert outcome.session_id == "s-old"
        assert [s.session_id for s in client.sessions.sessions] == ["s-old", "s-new", "s-mid"]
        assert client.sessions.get("s-old").title == "Old chat"
        assert [m.content for m in client.messages] == ["earlier", "again", "echo: again"]

    @pytest.mark.asyncio
    async def test_title_comes_from_first_timeline_message(self, client, backend):
        backend.histories["s-x"] = [
            Message(id="m1", role=MessageRole.USER, content="a" * 40),
        ]
        backend.replies = [ChatReply(session_id="s-x", message=assistant("ok"))]
        await client.select_session("s-x")

        await client.send("second question")

        assert client.sessions.get("s-x").title == "a" * 30

    @pytest.mark.asyncio
    async def test_payload_fields(self, client, backend):
        await client.bootstrap()
        client.select_model("")

        await client.send("  trimmed  ", system_prompt="", attachments=["att-9"])

        payload = backend.payloads[0]
        assert payload.message == "trimmed"
        assert payload.model is None
        assert payload.system_prompt is None
        assert payload.attachments == ["att-9"]
        assert client.messages[0].content == "trimmed"
        assert [a.id for a in client.messages[0].attachments] == ["att-9"]

    @pytest.mark.asyncio
    async def test_state_transitions(self, client):
        states = []
        client.pipeline.set_state_listener(states.append)

        await client.send("hi")

        assert states == [PipelineState.SENDING, PipelineState.SUCCESS, PipelineState.IDLE]
        assert client.pipeline.state == PipelineState.IDLE


class TestSendFailure:
    """Tests for sends that fail."""

    @pytest.mark.asyncio
    async def test_status_error_appends_error_message(self, client, backend, sample_sessions):
        """Test that an HTTP 500 leaves the user message and adds one error bubble."""
        backend.sessions = sample_sessions
        await client.bootstrap()
        sessions_before = client.sessions.sessions
        backend.errors["send_message"] = ApiStatusError(500, "boom")

        outcome = await client.send("hello?")

        assert outcome.status == SendStatus.FAILURE
        assert outcome.error == "Error: API 500: boom"
        messages = client.messages
        assert len(messages) == 2
        assert messages[0].role == MessageRole.USER
        assert messages[0].is_provisional
        assert messages[1].role == MessageRole.ASSISTANT
        assert messages[1].content == "Error: API 500: boom"
        assert messages[1].is_error
        assert not client.loading
        assert client.sessions.sessions == sessions_before
        assert client.current_session_id is None

    @pytest.mark.asyncio
    async def test_malformed_reply(self, client, backend):
        backend.errors["send_message"] = MalformedResponseError("/chat", "message: Field required")

        outcome = await client.send("hi")

        assert outcome.error == "Error: Malformed response from /chat: message: Field required"

    @pytest.mark.asyncio
    async def test_http_timeout(self, client, backend):
        backend.errors["send_message"] = RequestTimeoutError("Request to /chat timed out")

        outcome = await client.send("hi")

        assert client.messages[-1].content == "Error: Request to /chat timed out"
        assert not outcome.ok

    @pytest.mark.asyncio
    async def test_send_timeout(self, backend):
        client = ChatClient(backend, send_timeout=0.05)
        backend.send_gate = asyncio.Event()

        outcome = await client.send("slow")

        assert outcome.status == SendStatus.FAILURE
        assert outcome.error == "Error: Request timed out after 0.05s"
        assert len(client.messages) == 2
        assert not client.loading

    @pytest.mark.asyncio
    async def test_cancel(self, client, backend):
        backend.send_gate = asyncio.Event()

        task = asyncio.ensure_future(client.send("never mind"))
        await _until_loading(client)
        await asyncio.sleep(0)
        cancelled = client.cancel()
        outcome = await task

        assert cancelled
        assert outcome.error == "Error: Request cancelled"
        assert client.messages[-1].is_error
        assert not client.loading

    def test_cancel_without_send(self, client):
        assert client.cancel() is False


class TestAdmission:
    """Tests for rejected sends."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_message_rejected(self, client, backend, text):
        outcome = await client.send(text)

        assert outcome.status == SendStatus.REJECTED
        assert backend.payloads == []
        assert client.messages == []
        assert client.pipeline.state == PipelineState.IDLE

    @pytest.mark.asyncio
    async def test_second_send_rejected_while_loading(self, client, backend):
        backend.send_gate = asyncio.Event()

        first = asyncio.ensure_future(client.send("one"))
        await _until_loading(client)
        second = await client.send("two")
        backend.send_gate.set()
        result = await first

        assert second.status == SendStatus.REJECTED
        assert result.ok
        assert len(backend.payloads) == 1
        assert [m.content for m in client.messages] == ["one", "echo: one"]


class TestViewBinding:
    """Tests for completions arriving after the user moved on."""

    @pytest.mark.asyncio
    async def test_reply_after_switching_session(self, client, backend):
        backend.send_gate = asyncio.Event()
        backend.histories["other"] = [Message(id="o1", role=MessageRole.USER, content="other chat")]
        backend.replies = [ChatReply(session_id="s1", message=assistant("late reply"))]

        task = asyncio.ensure_future(client.send("first"))
        await _until_loading(client)
        await client.select_session("other")
        backend.send_gate.set()
        outcome = await task

        assert outcome.ok
        assert not outcome.delivered
        assert client.current_session_id == "other"
        assert [m.id for m in client.messages] == ["o1"]
        assert client.sessions.sessions[0].session_id == "s1"
        assert client.sessions.get("s1").title == "first"

    @pytest.mark.asyncio
    async def test_error_after_switching_session(self, client, backend):
        backend.send_gate = asyncio.Event()
        backend.errors["send_message"] = ApiStatusError(502, "", "Bad Gateway")

        task = asyncio.ensure_future(client.send("first"))
        await _until_loading(client)
        client.new_session()
        backend.send_gate.set()
        outcome = await task

        assert outcome.error == "Error: API 502: Bad Gateway"
        assert not outcome.delivered
        assert client.messages == []

    @pytest.mark.asyncio
    async def test_reply_after_reopening_same_session(self, client, backend):
        """Test that reopening the conversation a send started in still shows the reply."""
        backend.histories["s1"] = [Message(id="m1", role=MessageRole.USER, content="earlier")]
        backend.send_gate = asyncio.Event()
        await client.select_session("s1")

        task = asyncio.ensure_future(client.send("question"))
        await _until_loading(client)
        await client.select_session("s1")
        backend.send_gate.set()
        outcome = await task

        assert outcome.ok
        assert outcome.delivered
        assert client.current_session_id == "s1"
        assert [m.content for m in client.messages] == ["earlier", "echo: question"]

    @pytest.mark.asyncio
    async def test_error_after_reopening_same_session(self, client, backend):
        backend.histories["s1"] = [Message(id="m1", role=MessageRole.USER, content="earlier")]
        backend.send_gate = asyncio.Event()
        backend.errors["send_message"] = ApiStatusError(500, "boom")
        await client.select_session("s1")

        task = asyncio.ensure_future(client.send("question"))
        await _until_loading(client)
        await client.select_session("s1")
        backend.send_gate.set()
        outcome = await task

        assert outcome.delivered
        assert [m.content for m in client.messages] == ["earlier", "Error: API 500: boom"]

    @pytest.mark.asyncio
    async def test_reply_not_shown_in_another_new_chat(self, client, backend):
        """Test that a reply for one unsaved chat does not land in the next one."""
        backend.send_gate = asyncio.Event()

        task = asyncio.ensure_future(client.send("first"))
        await _until_loading(client)
        client.new_session()
        backend.send_gate.set()
        outcome = await task

        assert outcome.ok
        assert not outcome.delivered
        assert client.current_session_id is None
        assert client.messages == []

    @pytest.mark.asyncio
    async def test_start_new_then_send(self, client, backend, sample_sessions):
        backend.sessions = sample_sessions
        backend.histories["s-new"] = [Message(id="m1", role=MessageRole.USER, content="old")]
        backend.replies = [ChatReply(session_id="srv-42", message=assistant("fresh"))]
        await client.bootstrap()
        await client.select_session("s-new")

        client.new_session()
        assert client.messages == []
        outcome = await client.send("brand new")

        assert backend.payloads[0].session_id is None
        assert outcome.session_id == "srv-42"
        assert client.current_session_id == "srv-42"
        assert client.sessions.sessions[0].session_id == "srv-42"
        assert client.sessions.get("srv-42").title == "brand new"
