"""Message timeline for the session currently on screen."""

from uuid_extensions import uuid7

from .base import StateComponent
from .models import (
    ERROR_ID_PREFIX,
    TEMP_ID_PREFIX,
    Attachment,
    AttachmentRef,
    Message,
    MessageRole,
)


class MessageTimeline(StateComponent):
    """Append-ordered message list of the current session.

    Messages are only ever appended; the list is replaced wholesale when
    a different session is opened. Each ``open`` starts a new view, and
    ``view`` lets a pending operation check that the user has not moved
    to another conversation in the meantime.
    """

    COMPONENT = "Timeline"

    def __init__(self) -> None:
        super().__init__()
        self._messages: list[Message] = []
        self._session_id: str | None = None
        self._view = 0

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def session_id(self) -> str | None:
        """Session whose history is displayed (None for an unsaved chat)."""
        return self._session_id

    @property
    def view(self) -> int:
        """Token identifying the conversation currently open."""
        return self._view

    def __len__(self) -> int:
        return len(self._messages)

    def first(self) -> Message | None:
        return self._messages[0] if self._messages else None

    def open(self, session_id: str | None) -> int:
        """Start showing a session (or a new, unsaved one) with no messages.

        Returns:
            The new view token
        """
        self._view += 1
        self._session_id = session_id
        self._messages = []
        return self._view

    def bind(self, session_id: str) -> None:
        """Attach a server-assigned id to the unsaved chat being shown."""
        self._session_id = session_id

    def replace(self, messages: list[Message]) -> None:
        """Replace the whole message list."""
        self._messages = list(messages)
        self._debug("debug", f"Timeline replaced with {len(self._messages)} message(s)")

    def append_optimistic(
        self,
        content: str,
        attachments: list[AttachmentRef] | None = None
    ) -> Message:
        """Append a user message before the backend has confirmed it."""
        message = Message(
            id=f"{TEMP_ID_PREFIX}{uuid7()}",
            role=MessageRole.USER,
            content=content,
            attachments=[Attachment(id=ref) for ref in attachments or []],
        )
        self._messages.append(message)
        return message

    def append_from_server(self, message: Message) -> Message:
        """Append a message exactly as the backend returned it."""
        self._messages.append(message)
        return message

    def append_error(self, text: str) -> Message:
        """Append a synthetic assistant message describing a failed send."""
        message = Message(
            id=f"{ERROR_ID_PREFIX}{uuid7()}",
            role=MessageRole.ASSISTANT,
            content=text,
        )
        self._messages.append(message)
        self._debug("debug", f"Error message appended: {text}")
        return message
