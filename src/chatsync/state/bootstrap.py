"""Startup loading of models and sessions."""

from dataclasses import dataclass, field

from .base import StateComponent
from .models import ModelListing, Session
from .registry import ModelRegistry
from .sessions import SessionStore


@dataclass
class BootstrapResult:
    """What the client knows right after startup."""

    models: ModelListing
    sessions: list[Session] = field(default_factory=list)


class BootstrapLoader(StateComponent):
    """Populates the model registry and the session store once at startup."""

    COMPONENT = "Boot"

    def __init__(self, registry: ModelRegistry, store: SessionStore) -> None:
        super().__init__()
        self._registry = registry
        self._store = store

    async def run(self) -> BootstrapResult:
        """Load models, then sessions. Never raises; failures degrade to empty state."""
        models = await self._registry.load()
        sessions = await self._store.bootstrap()
        self._debug(
            "info",
            f"Bootstrap done: {len(models.models)} model(s), {len(sessions)} session(s),"
            f" healthy={models.healthy}"
        )
        return BootstrapResult(models=models, sessions=sessions)
