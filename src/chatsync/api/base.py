from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..state.models import ChatPayload, ChatReply, MessageListing, ModelListing, SessionListing


class ChatBackend(ABC):
    """Abstract base class for chat backends.

    This module hides the design decision of how the client talks to the
    chat service. Implementations must handle transport-specific details like:
    - Connection setup and base URL resolution
    - Request encoding (JSON bodies, multipart uploads)
    - Response decoding and shape validation
    - Mapping transport failures onto ``ChatApiError`` subclasses

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            listing = await backend.list_models()
    """

    def __init__(self) -> None:
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        """Send debug message if callback is set."""
        if self._debug_callback:
            self._debug_callback(level, "HTTP", message)

    @abstractmethod
    async def list_models(self) -> ModelListing:
        """Fetch the models the backend can route to.

        Raises:
            ChatApiError: If the listing cannot be retrieved
        """

    @abstractmethod
    async def list_sessions(self) -> SessionListing:
        """Fetch the known chat sessions.

        Raises:
            ChatApiError: If the listing cannot be retrieved
        """

    @abstractmethod
    async def load_messages(self, session_id: str) -> MessageListing:
        """Fetch the message history of one session.

        Args:
            session_id: Session to load

        Raises:
            ChatApiError: If the history cannot be retrieved
        """

    @abstractmethod
    async def send_message(self, payload: ChatPayload) -> ChatReply:
        """Send a user message and wait for the assistant reply.

        Args:
            payload: Message, target session (None for a new one), model and attachments

        Returns:
            The session id the message was stored under and the assistant reply

        Raises:
            ChatApiError: If the send fails or the reply is malformed
        """

    @abstractmethod
    async def upload(self, path: Path, photo: bool = False) -> str:
        """Upload a file or photo.

        Args:
            path: Local file to upload
            photo: Use the photo endpoint instead of the generic file endpoint

        Returns:
            The attachment id assigned by the backend

        Raises:
            ChatApiError: If the upload fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ChatBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
