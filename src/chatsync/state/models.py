"""Data models for the client-side chat state.

These models mirror the JSON shapes exchanged with the chat backend
and are shared by the stores, the send pipeline and the backend client.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Opaque attachment identifier returned by the upload endpoints
AttachmentRef = str

TEMP_ID_PREFIX = "temp_"
ERROR_ID_PREFIX = "err_"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MessageRole(str, Enum):
    """Author of a timeline message."""

    USER = "user"
    ASSISTANT = "assistant"


class Attachment(BaseModel):
    """An attachment reference carried by a message.

    The backend may describe attachments as objects with a filename and
    size, while uploads only hand back the bare id. Both forms are accepted.
    """

    id: AttachmentRef = Field(description="Identifier returned by the upload endpoint")
    filename: str | None = Field(default=None, description="Original file name, if known")
    size_bytes: int | None = Field(default=None, ge=0, description="File size, if known")

    @model_validator(mode="before")
    @classmethod
    def accept_bare_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": data}
        return data

    @property
    def label(self) -> str:
        """Human readable description used by the UI."""
        name = self.filename or self.id
        if self.size_bytes:
            return f"{name} ({self.size_bytes} bytes)"
        return name


class Message(BaseModel):
    """A single message in a session's timeline."""

    id: str = Field(description="Server id, or a local temp_/err_ id")
    role: MessageRole = Field(description="Who authored the message")
    content: str = Field(default="", description="Message text")
    attachments: list[Attachment] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Model that produced the reply")
    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation time (receipt time when the server sends null)"
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def null_as_now(cls, v: Any) -> Any:
        return utcnow() if v is None else v

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("attachments", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def is_provisional(self) -> bool:
        """True for an optimistic message not yet confirmed by the server."""
        return self.id.startswith(TEMP_ID_PREFIX)

    @property
    def is_error(self) -> bool:
        """True for a locally generated send-failure message."""
        return self.id.startswith(ERROR_ID_PREFIX)


class Session(BaseModel):
    """A server-tracked conversation."""

    session_id: str
    title: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v) if v is not None else None

    @model_validator(mode="after")
    def default_updated_at(self) -> "Session":
        if self.updated_at is None:
            self.updated_at = self.created_at
        return self


class ModelInfo(BaseModel):
    """A model the backend can route messages to."""

    model_config = ConfigDict(frozen=True)

    name: str
    provider: str = ""
    status: str = Field(default="available", description="'available' or a provider-specific status")
    selected: bool = False

    @property
    def available(self) -> bool:
        return self.status == "available"


class ModelListing(BaseModel):
    """Response of the model listing endpoint."""

    provider: str = ""
    healthy: bool = False
    models: list[ModelInfo] = Field(default_factory=list)


class SessionListing(BaseModel):
    """Response of the session listing endpoint."""

    sessions: list[Session] = Field(default_factory=list)


class MessageListing(BaseModel):
    """Response of the message history endpoint."""

    messages: list[Message] = Field(default_factory=list)


class SendRequest(BaseModel):
    """What the user asked to send, before it is bound to a session."""

    message: str
    system_prompt: str | None = None
    attachments: list[AttachmentRef] = Field(default_factory=list)


class ChatPayload(BaseModel):
    """Body of ``POST /chat``."""

    session_id: str | None = None
    message: str
    model: str | None = None
    attachments: list[AttachmentRef] = Field(default_factory=list)
    system_prompt: str | None = None


class ChatReply(BaseModel):
    """Response of ``POST /chat``."""

    session_id: str
    message: Message


class UploadReceipt(BaseModel):
    """Response of the upload endpoints."""

    id: AttachmentRef
