"""Factory for creating chat backends."""

from typing import Any

from .base import ChatBackend
from .http import HttpChatBackend


def create_chat_backend(backend: str = "http", **config: Any) -> ChatBackend:
    """Create a chat backend instance.

    This factory function hides which transport the client uses to reach
    the chat service.

    Args:
        backend: Backend type ("http" currently supported)
        **config: Backend-specific configuration
            For HTTP:
                - base_url: str (default: 'http://localhost:8000')
                - timeout: float | None (default: 30.0)

    Returns:
        Initialized chat backend

    Raises:
        ValueError: If backend type is not supported

    Example:
        >>> backend = create_chat_backend("http", base_url="http://localhost:8000")
        >>> async with backend:
        ...     listing = await backend.list_models()
    """
    if backend.lower() == "http":
        return HttpChatBackend(**config)

    raise ValueError(
        f"Unsupported chat backend: {backend}. "
        f"Supported backends: http"
    )
