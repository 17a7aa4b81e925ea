"""Backend client layer for chatsync."""

from .base import ChatBackend
from .errors import (
    ApiStatusError,
    ChatApiError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)
from .factory import create_chat_backend
from .http import HttpChatBackend

__all__ = [
    "ChatBackend",
    "HttpChatBackend",
    "create_chat_backend",
    "ApiStatusError",
    "ChatApiError",
    "MalformedResponseError",
    "RequestTimeoutError",
    "TransportError",
]
