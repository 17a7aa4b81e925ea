"""Optimistic send pipeline.

Drives one send from the user's text to a reconciled timeline:

    IDLE -> SENDING -> SUCCESS | FAILURE -> IDLE

The user message is appended before the backend answers and is never
rolled back. The reply, or a synthetic error message, is appended only
if the user is still looking at the conversation the send started in.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..api.errors import ChatApiError
from .base import StateComponent
from .models import ChatPayload, ChatReply, Message, SendRequest
from .registry import ModelRegistry
from .sessions import SessionStore
from .timeline import MessageTimeline

if TYPE_CHECKING:
    from ..api.base import ChatBackend

TITLE_MAX_LENGTH = 30


class PipelineState(str, Enum):
    """States of the send pipeline."""

    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    FAILURE = "failure"


class SendStatus(str, Enum):
    """How a send request ended."""

    REJECTED = "rejected"   # Empty message or another send in flight
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class SendOutcome:
    """Result of ``SendPipeline.send``."""

    status: SendStatus
    session_id: str | None = None
    user_message: Message | None = None
    reply: Message | None = None
    error: str | None = None
    delivered: bool = False  # Whether the reply/error landed in the visible timeline

    @property
    def ok(self) -> bool:
        return self.status == SendStatus.SUCCESS


class SendPipeline(StateComponent):
    """Sends user messages with optimistic insertion and reconciliation.

    The ``loading`` flag is the only admission control: while a send is
    in flight every other send is rejected. Each send is bounded by
    ``timeout`` seconds and can be aborted with ``cancel()``.
    """

    COMPONENT = "Send"

    def __init__(
        self,
        backend: "ChatBackend",
        registry: ModelRegistry,
        store: SessionStore,
        timeline: MessageTimeline,
        timeout: float | None = 120.0,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._registry = registry
        self._store = store
        self._timeline = timeline
        self._timeout = timeout
        self._state = PipelineState.IDLE
        self._loading = False
        self._inflight: asyncio.Future | None = None
        self._cancel_requested = False
        self._state_listener: Any | None = None

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def loading(self) -> bool:
        """True while a send is in flight."""
        return self._loading

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def set_state_listener(self, listener: Any) -> None:
        """Set a callback invoked on every state transition.

        Args:
            listener: Callable(state: PipelineState)
        """
        self._state_listener = listener

    def _transition(self, state: PipelineState) -> None:
        self._state = state
        if self._state_listener:
            self._state_listener(state)

    def title_hint(self, content: str) -> str | None:
        """Title for the session a send lands in.

        Taken from the first message already in the timeline; a fresh
        conversation falls back to the message being sent.
        """
        first = self._timeline.first()
        source = first.content if first is not None else content
        return source[:TITLE_MAX_LENGTH] or None

    def cancel(self) -> bool:
        """Abort the in-flight send, if any.

        Returns:
            True if a pending request was cancelled
        """
        if self._inflight is None or self._inflight.done():
            return False
        self._cancel_requested = True
        self._inflight.cancel()
        self._debug("info", "Send cancelled by user")
        return True

    async def send(self, request: SendRequest) -> SendOutcome:
        """Send a message to the current session (or start a new one).

        Args:
            request: Message text, optional system prompt and attachment ids

        Returns:
            The outcome; failures are reported here and in the timeline,
            never raised
        """
        content = request.message.strip()
        if not content:
            self._debug("debug", "Rejected empty message")
            return SendOutcome(status=SendStatus.REJECTED, error="Message is empty")
        if self.loading:
            self._debug("debug", "Rejected send while another is in flight")
            return SendOutcome(status=SendStatus.REJECTED, error="A message is already being sent")

        origin_session = self._store.current_id
        view = self._timeline.view
        title_hint = self.title_hint(content)
        self._cancel_requested = False
        self._loading = True

        user_message = self._timeline.append_optimistic(content, request.attachments)
        self._transition(PipelineState.SENDING)

        payload = ChatPayload(
            session_id=origin_session,
            message=content,
            model=self._registry.current_selection(),
            attachments=list(request.attachments),
            system_prompt=request.system_prompt or None,
        )
        self._debug(
            "info",
            f"Sending to {origin_session or 'new session'} (model={payload.model or 'auto'})"
        )

        try:
            try:
                reply = await self._call_backend(payload)
            except ChatApiError as e:
                outcome = self._fail(str(e), origin_session, view, user_message)
            except asyncio.TimeoutError:
                outcome = self._fail(
                    f"Request timed out after {self._timeout}s", origin_session, view, user_message
                )
            except asyncio.CancelledError:
                if not self._cancel_requested:
                    raise
                outcome = self._fail("Request cancelled", origin_session, view, user_message)
            except Exception as e:
                self._debug("error", f"Unexpected send failure: {e!r}")
                outcome = self._fail(str(e) or type(e).__name__, origin_session, view, user_message)
            else:
                outcome = self._succeed(reply, origin_session, view, title_hint, user_message)
        finally:
            self._inflight = None
            self._cancel_requested = False
            self._loading = False
            self._transition(PipelineState.IDLE)
        return outcome

    async def _call_backend(self, payload: ChatPayload) -> ChatReply:
        self._inflight = asyncio.ensure_future(self._backend.send_message(payload))
        return await asyncio.wait_for(self._inflight, timeout=self._timeout)

    def _still_viewing(self, origin_session: str | None, view: int) -> bool:
        """Whether the conversation a send started in is still on screen.

        A saved session counts even if it was reopened since. An unsaved
        chat only counts while its view is unchanged, since every new chat
        has the same (empty) session id.
        """
        if self._timeline.view == view:
            return True
        return origin_session is not None and self._store.current_id == origin_session

    def _succeed(
        self,
        reply: ChatReply,
        origin_session: str | None,
        view: int,
        title_hint: str | None,
        user_message: Message,
    ) -> SendOutcome:
        still_viewing = self._still_viewing(origin_session, view)
        if origin_session is None and still_viewing:
            self._store.adopt(reply.session_id)

        self._store.upsert(reply.session_id, title_hint)

        if still_viewing:
            self._timeline.append_from_server(reply.message)
        else:
            self._debug("info", f"Reply for {reply.session_id} arrived after leaving the chat; not shown")

        self._transition(PipelineState.SUCCESS)
        return SendOutcome(
            status=SendStatus.SUCCESS,
            session_id=reply.session_id,
            user_message=user_message,
            reply=reply.message,
            delivered=still_viewing,
        )

    def _fail(
        self,
        description: str,
        origin_session: str | None,
        view: int,
        user_message: Message,
    ) -> SendOutcome:
        text = f"Error: {description}"
        self._debug("error", text)

        still_viewing = self._still_viewing(origin_session, view)
        if still_viewing:
            self._timeline.append_error(text)

        self._transition(PipelineState.FAILURE)
        return SendOutcome(
            status=SendStatus.FAILURE,
            session_id=origin_session,
            user_message=user_message,
            error=text,
            delivered=still_viewing,
        )
