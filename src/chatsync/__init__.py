"""
chatsync: a terminal client for HTTP chat services.

Keeps local state for chat sessions, message history, model selection and
attachments, and synchronizes it with the backend through optimistic sends.
Each subpackage hides one design decision: ``api`` the transport, ``state``
the synchronization rules, ``ui`` and ``cli`` the presentation.
"""

__version__ = "0.1.0"

from .client import ChatClient
from .config import ClientConfig
from .state import (
    Message,
    MessageRole,
    ModelInfo,
    PipelineState,
    SendOutcome,
    SendStatus,
    Session,
    UploadError,
)

__all__ = [
    "ChatClient",
    "ClientConfig",
    "Message",
    "MessageRole",
    "ModelInfo",
    "PipelineState",
    "SendOutcome",
    "SendStatus",
    "Session",
    "UploadError",
]
