"""Pytest configuration and shared fixtures."""
import asyncio
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from chatsync.api import ChatBackend
from chatsync.client import ChatClient
from chatsync.state.models import (
    ChatPayload,
    ChatReply,
    Message,
    MessageListing,
    MessageRole,
    ModelInfo,
    ModelListing,
    Session,
    SessionListing,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Fixed timestamp ``minutes`` after BASE_TIME."""
    return BASE_TIME + timedelta(minutes=minutes)


def assistant(content: str, message_id: str = "m-reply", model: str | None = None) -> Message:
    return Message(id=message_id, role=MessageRole.ASSISTANT, content=content, model=model)


class FakeChatBackend(ChatBackend):
    """In-memory backend with scripted responses.

    Set an entry in ``errors`` (keyed by method name) to make that call
    raise. ``send_gate`` and ``history_gates`` hold calls until released.
    """

    def __init__(self) -> None:
        super().__init__()
        self.models = ModelListing(
            provider="openai",
            healthy=True,
            models=[
                ModelInfo(name="gpt-x", provider="openai", selected=True),
                ModelInfo(name="gpt-mini", provider="openai"),
            ],
        )
        self.sessions: list[Session] = []
        self.histories: dict[str, list[Message]] = {}
        self.replies: list[ChatReply | Exception] = []
        self.errors: dict[str, Exception] = {}
        self.payloads: list[ChatPayload] = []
        self.uploaded: list[tuple[Path, bool]] = []
        self.send_gate: asyncio.Event | None = None
        self.history_gates: dict[str, asyncio.Event] = {}
        self.closed = False

    def _check(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    async def list_models(self) -> ModelListing:
        self._check("list_models")
        return self.models

    async def list_sessions(self) -> SessionListing:
        self._check("list_sessions")
        return SessionListing(sessions=list(self.sessions))

    async def load_messages(self, session_id: str) -> MessageListing:
        gate = self.history_gates.get(session_id)
        if gate is not None:
            await gate.wait()
        self._check("load_messages")
        return MessageListing(messages=list(self.histories.get(session_id, [])))

    async def send_message(self, payload: ChatPayload) -> ChatReply:
        self.payloads.append(payload)
        if self.send_gate is not None:
            await self.send_gate.wait()
        self._check("send_message")
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return ChatReply(
            session_id=payload.session_id or "s-created",
            message=assistant(f"echo: {payload.message}", f"m{len(self.payloads)}", payload.model),
        )

    async def upload(self, path: Path, photo: bool = False) -> str:
        self._check("upload")
        self.uploaded.append((path, photo))
        return f"att-{len(self.uploaded)}"

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def backend():
    """Return a fake backend with two models and no sessions."""
    return FakeChatBackend()


@pytest.fixture
def client(backend):
    """Return a chat client over the fake backend."""
    return ChatClient(backend, send_timeout=5.0)


@pytest.fixture
def sample_sessions():
    """Return three sessions in no particular order."""
    return [
        Session(session_id="s-old", title="Old chat", created_at=at(0), updated_at=at(1)),
        Session(session_id="s-new", title="Newest chat", created_at=at(2), updated_at=at(30)),
        Session(session_id="s-mid", title=None, created_at=at(3), updated_at=at(10)),
    ]


@pytest.fixture(scope="session")
def api_base():
    """Return the live service URL used by integration tests."""
    return os.getenv("CHATSYNC_API_BASE")
