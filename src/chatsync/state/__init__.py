"""Client-side chat state: models, stores and the send pipeline."""

from .models import (
    Attachment,
    AttachmentRef,
    ChatPayload,
    ChatReply,
    Message,
    MessageListing,
    MessageRole,
    ModelInfo,
    ModelListing,
    SendRequest,
    Session,
    SessionListing,
)
from .registry import ModelRegistry
from .timeline import MessageTimeline
from .sessions import DEFAULT_SESSION_TITLE, SessionStore
from .pipeline import PipelineState, SendOutcome, SendPipeline, SendStatus
from .bootstrap import BootstrapLoader, BootstrapResult
from .uploads import AttachmentUploader, UploadError

__all__ = [
    "Attachment",
    "AttachmentRef",
    "AttachmentUploader",
    "BootstrapLoader",
    "BootstrapResult",
    "ChatPayload",
    "ChatReply",
    "DEFAULT_SESSION_TITLE",
    "Message",
    "MessageListing",
    "MessageRole",
    "MessageTimeline",
    "ModelInfo",
    "ModelListing",
    "ModelRegistry",
    "PipelineState",
    "SendOutcome",
    "SendPipeline",
    "SendRequest",
    "SendStatus",
    "Session",
    "SessionListing",
    "SessionStore",
    "UploadError",
]
