"""Chat client facade.

Wires the model registry, session store, message timeline, upload tray
and send pipeline around a single backend. User interfaces talk to this
object only; it holds no state of its own beyond the components.
"""

from pathlib import Path
from typing import Any

from .api import ChatBackend, create_chat_backend
from .config import ClientConfig
from .state import (
    AttachmentRef,
    AttachmentUploader,
    BootstrapLoader,
    BootstrapResult,
    Message,
    MessageTimeline,
    ModelRegistry,
    SendOutcome,
    SendPipeline,
    SendRequest,
    SendStatus,
    SessionStore,
)


class ChatClient:
    """User-level chat operations over one backend.

    Example:
        async with ChatClient.from_config(ClientConfig.from_env()) as client:
            await client.bootstrap()
            outcome = await client.send("Hello")
    """

    def __init__(self, backend: ChatBackend, send_timeout: float | None = 120.0) -> None:
        self.backend = backend
        self.timeline = MessageTimeline()
        self.registry = ModelRegistry(backend)
        self.sessions = SessionStore(backend, self.timeline)
        self.uploads = AttachmentUploader(backend)
        self.pipeline = SendPipeline(
            backend,
            self.registry,
            self.sessions,
            self.timeline,
            timeout=send_timeout,
        )
        self.loader = BootstrapLoader(self.registry, self.sessions)

    @classmethod
    def from_config(cls, config: ClientConfig, **backend_kwargs: Any) -> "ChatClient":
        """Create a client talking HTTP to ``config.api_base``."""
        backend = create_chat_backend(
            "http",
            base_url=config.api_base,
            timeout=config.request_timeout,
            **backend_kwargs
        )
        return cls(backend, send_timeout=config.send_timeout)

    def set_debug_callback(self, callback: Any) -> None:
        """Route trace messages from every component to one callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self.backend.set_debug_callback(callback)
        for component in (
            self.timeline,
            self.registry,
            self.sessions,
            self.uploads,
            self.pipeline,
            self.loader,
        ):
            component.set_debug_callback(callback)

    @property
    def loading(self) -> bool:
        return self.pipeline.loading

    @property
    def messages(self) -> list[Message]:
        return self.timeline.messages

    @property
    def current_session_id(self) -> str | None:
        return self.sessions.current_id

    async def bootstrap(self) -> BootstrapResult:
        return await self.loader.run()

    async def select_session(self, session_id: str) -> list[Message]:
        return await self.sessions.select_current(session_id)

    def new_session(self) -> None:
        self.sessions.start_new()

    def select_model(self, name: str | None) -> None:
        self.registry.select(name)

    async def upload(self, path: str | Path, photo: bool = False) -> AttachmentRef:
        """Upload and stage an attachment. Raises ``UploadError`` on failure."""
        return await self.uploads.upload(path, photo=photo)

    async def send(
        self,
        message: str,
        system_prompt: str | None = None,
        attachments: list[AttachmentRef] | None = None,
    ) -> SendOutcome:
        """Send a message through the optimistic pipeline.

        Args:
            message: Text to send (rejected if blank)
            system_prompt: Optional system prompt for this message
            attachments: Attachment ids; defaults to the staged uploads

        Returns:
            The send outcome
        """
        refs = self.uploads.pending if attachments is None else list(attachments)
        outcome = await self.pipeline.send(
            SendRequest(message=message, system_prompt=system_prompt, attachments=refs)
        )
        if outcome.status != SendStatus.REJECTED:
            self.uploads.discard(refs)
        return outcome

    def cancel(self) -> bool:
        """Abort the in-flight send, if any."""
        return self.pipeline.cancel()

    async def close(self) -> None:
        await self.backend.close()

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.backend.__aexit__(exc_type, exc_val, exc_tb)
