"""Shared plumbing for the client state components."""

from typing import Any


class StateComponent:
    """Base class giving a component a debug callback.

    Subclasses set ``COMPONENT`` to the name shown in trace logs.
    """

    COMPONENT = "Core"

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
            self._debug_callback(level, self.COMPONENT, message)
