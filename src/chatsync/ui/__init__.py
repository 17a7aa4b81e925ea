"""Terminal UI module for chatsync.

Provides a Textual-based TUI over a ``ChatClient``.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input bar, session list, chat history, log panel)
- formatting.py: How timestamps, labels and message metadata are shown
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (alerts, upload prompt)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatSyncApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, SessionList

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatSyncApp",
    "DebugPanel",
    "LogLevel",
    "SessionList",
    "run_textual_tui",
]
