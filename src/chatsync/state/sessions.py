"""Session store: known sessions, recency ordering and the current session."""

from typing import TYPE_CHECKING

from ..api.errors import ChatApiError
from .base import StateComponent
from .models import Message, Session, utcnow
from .timeline import MessageTimeline

if TYPE_CHECKING:
    from ..api.base import ChatBackend

DEFAULT_SESSION_TITLE = "New chat"


def _recency(session: Session):
    return session.updated_at


class SessionStore(StateComponent):
    """Owns the session list and which session is current.

    The list is kept sorted by ``updated_at``, newest first, after every
    mutation. Switching sessions drives the message timeline: it is
    reopened for the new session and refilled from the backend.
    """

    COMPONENT = "Sessions"

    def __init__(self, backend: "ChatBackend", timeline: MessageTimeline) -> None:
        super().__init__()
        self._backend = backend
        self._timeline = timeline
        self._sessions: list[Session] = []
        self._current_id: str | None = None

    @property
    def sessions(self) -> list[Session]:
        return list(self._sessions)

    @property
    def current_id(self) -> str | None:
        """Current session id, or None while composing a new chat."""
        return self._current_id

    def get(self, session_id: str) -> Session | None:
        return next((s for s in self._sessions if s.session_id == session_id), None)

    async def bootstrap(self) -> list[Session]:
        """Fetch the session list from the backend.

        Failures leave the list empty and are only logged.
        """
        try:
            listing = await self._backend.list_sessions()
        except ChatApiError as e:
            self._debug("warning", f"Failed to fetch sessions: {e}")
            self._sessions = []
            return []

        self._sessions = sorted(listing.sessions, key=_recency, reverse=True)
        self._debug("info", f"Loaded {len(self._sessions)} session(s)")
        return self.sessions

    async def select_current(self, session_id: str) -> list[Message]:
        """Make a session current and reload its history into the timeline.

        A failed reload leaves the timeline empty. A reload that completes
        after the user has already opened another conversation is dropped.

        Returns:
            The messages now shown for the session
        """
        self._current_id = session_id
        view = self._timeline.open(session_id)
        try:
            listing = await self._backend.load_messages(session_id)
        except ChatApiError as e:
            self._debug("warning", f"Failed to fetch messages for {session_id}: {e}")
            return []

        if self._timeline.view != view:
            self._debug("debug", f"Discarded stale history for {session_id}")
            return []

        self._timeline.replace(listing.messages)
        return listing.messages

    def start_new(self) -> None:
        """Switch to a new, unsaved chat. No backend call is made."""
        self._current_id = None
        self._timeline.open(None)

    def adopt(self, session_id: str) -> None:
        """Make a server-assigned session current without reloading it."""
        self._current_id = session_id
        self._timeline.bind(session_id)

    def upsert(self, session_id: str, title_hint: str | None = None) -> Session:
        """Record activity on a session and move it to the front.

        An existing session gets a fresh ``updated_at`` and, only if it has
        no title yet, the hint as title. An unknown session is inserted,
        titled with the hint or a default.

        Returns:
            The touched session, now first in the list
        """
        now = utcnow()
        latest = max((s.updated_at for s in self._sessions), default=None)
        if latest is not None and latest > now:
            now = latest

        existing = self.get(session_id)
        if existing is not None:
            session = existing.model_copy(update={
                "updated_at": now,
                "title": existing.title or title_hint,
            })
            others = [s for s in self._sessions if s.session_id != session_id]
        else:
            session = Session(
                session_id=session_id,
                title=title_hint or DEFAULT_SESSION_TITLE,
                created_at=now,
                updated_at=now,
            )
            others = list(self._sessions)
            self._debug("info", f"New session {session_id}: {session.title!r}")

        # sorted() is stable, so the touched session wins ties
        self._sessions = sorted([session, *others], key=_recency, reverse=True)
        return session
