"""Model registry: available models and the single active selection."""

from typing import TYPE_CHECKING

from ..api.errors import ChatApiError
from .base import StateComponent
from .models import ModelInfo, ModelListing

if TYPE_CHECKING:
    from ..api.base import ChatBackend


class ModelRegistry(StateComponent):
    """Holds the models offered by the backend and which one is selected.

    The selection is stored as a single nullable name rather than a flag
    per model, so at most one model can ever be selected. The ``selected``
    flags on the models handed out are derived from that name.
    """

    COMPONENT = "Models"

    def __init__(self, backend: "ChatBackend") -> None:
        super().__init__()
        self._backend = backend
        self._models: list[ModelInfo] = []
        self._selected: str | None = None
        self._provider = ""
        self._healthy = True

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def healthy(self) -> bool:
        return self._healthy

    @property
    def models(self) -> list[ModelInfo]:
        """Models in backend order, with ``selected`` reflecting the registry."""
        return [
            m.model_copy(update={"selected": m.name == self._selected})
            for m in self._models
        ]

    async def load(self) -> ModelListing:
        """Fetch the model list from the backend.

        Never raises: on failure the registry is marked unhealthy and left
        empty, and the failure is only logged.

        Returns:
            The listing now held by the registry
        """
        try:
            listing = await self._backend.list_models()
        except ChatApiError as e:
            self._debug("warning", f"Failed to fetch models: {e}")
            self._healthy = False
            self._models = []
            self._selected = None
            return ModelListing(provider=self._provider, healthy=False, models=[])

        self._provider = listing.provider
        self._healthy = listing.healthy
        self._models = list(listing.models)
        self._selected = next((m.name for m in listing.models if m.selected), None)
        self._debug(
            "info",
            f"Loaded {len(self._models)} model(s) from {self._provider or 'unknown provider'}"
            f" (healthy={self._healthy}, selected={self._selected})"
        )
        return ModelListing(provider=self._provider, healthy=self._healthy, models=self.models)

    def select(self, name: str | None) -> None:
        """Select a model by exact name.

        An unknown name (including the empty "Auto" choice) clears the
        selection instead of raising.
        """
        if name and any(m.name == name for m in self._models):
            self._selected = name
        else:
            if name:
                self._debug("debug", f"Unknown model '{name}', selection cleared")
            self._selected = None

    def current_selection(self) -> str | None:
        """Name of the selected model, or None for automatic routing."""
        return self._selected
