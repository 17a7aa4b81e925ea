"""Main Textual TUI application.

Orchestrates the UI components around a ``ChatClient``. The client's
stores are the source of truth; widgets are refreshed from them after
every operation and on every send pipeline transition.
"""

import asyncio
import contextlib
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, Footer, Header, OptionList, Select, Static

from ..client import ChatClient
from ..state import PipelineState, SendStatus, UploadError
from .config import THINKING_TEXT, LogLevel
from .formatting import model_options, provider_status
from .screens import AlertScreen, AttachScreen
from .styles import APP_CSS
from .themes import OCEAN_DARK, OCEAN_LIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, SessionList


class ChatSyncApp(App):
    """Textual TUI for an HTTP chat service."""

    CSS = APP_CSS
    TITLE = "LLM Chat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("escape", "cancel_send", "Cancel"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
        Binding("ctrl+t", "toggle_theme", "Theme"),
    ]

    def __init__(self, client: ChatClient, log_level: str | None = None, dark: bool = False) -> None:
        super().__init__()
        self._client = client
        self._log_level = log_level
        self._dark = dark

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(id="sidebar"):
            yield Static("Model", classes="sidebar-label")
            yield Select(
                model_options([]),
                id="model-select",
                allow_blank=False,
                value="",
            )
            yield Button("+ New Chat", id="new-chat")
            yield SessionList(id="session-list")

        with Vertical(id="main"):
            yield ChatHistoryWidget(id="chat-history")
            yield Static(THINKING_TEXT, id="thinking")
            yield ChatInputBar(id="chat-input-bar")
            yield DebugPanel(id="debug-panel")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(OCEAN_LIGHT)
        self.register_theme(OCEAN_DARK)
        self.theme = OCEAN_DARK.name if self._dark else OCEAN_LIGHT.name

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._client.set_debug_callback(log_panel.trace)
        self._client.pipeline.set_state_listener(self._on_pipeline_state)

        self.sub_title = provider_status("", True)
        self._refresh_sessions()
        self._refresh_loading()
        self._bootstrap()

    # ------------------------------------------------------------------
    # Refresh helpers: copy store state into widgets
    # ------------------------------------------------------------------

    def _refresh_models(self) -> None:
        registry = self._client.registry
        select = self.query_one("#model-select", Select)
        with select.prevent(Select.Changed):
            select.set_options(model_options(registry.models))
            select.value = registry.current_selection() or ""
        self.sub_title = provider_status(registry.provider, registry.healthy)

    def _refresh_sessions(self) -> None:
        self.query_one("#session-list", SessionList).set_sessions(
            self._client.sessions.sessions,
            self._client.current_session_id,
        )

    def _refresh_timeline(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).sync(self._client.messages)

    def _refresh_loading(self) -> None:
        loading = self._client.loading
        self.query_one("#thinking", Static).display = loading
        self.query_one("#chat-input-bar", ChatInputBar).disabled = loading

    def _refresh_attachments(self) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).show_attachments(self._client.uploads.pending)

    def _on_pipeline_state(self, state: PipelineState) -> None:
        self._refresh_timeline()
        if state in (PipelineState.SUCCESS, PipelineState.IDLE):
            self._refresh_sessions()
        self._refresh_loading()

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    @work(exclusive=True, group="bootstrap")
    async def _bootstrap(self) -> None:
        result = await self._client.bootstrap()
        self._refresh_models()
        self._refresh_sessions()
        if not result.models.healthy:
            self.notify("Model provider unavailable", severity="warning", timeout=4)

    @work(exclusive=True, group="history")
    async def _open_session(self, session_id: str) -> None:
        await self._client.select_session(session_id)
        self._refresh_sessions()
        self._refresh_timeline()

    @work(group="send")
    async def _send(self, message: str, system_prompt: str | None) -> None:
        outcome = await self._client.send(message, system_prompt=system_prompt)
        self._refresh_attachments()
        if outcome.status == SendStatus.REJECTED:
            self.notify(outcome.error or "Message not sent", severity="warning", timeout=2)
        elif outcome.status == SendStatus.FAILURE and not outcome.delivered:
            self.notify(outcome.error or "Send failed", severity="error", timeout=5)
        elif outcome.ok and not outcome.delivered:
            self.notify("Reply received in another chat", timeout=3)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    @work(group="upload")
    async def _upload(self, path: Path, photo: bool) -> None:
        try:
            ref = await self._client.upload(path, photo=photo)
        except UploadError as e:
            self.push_screen(AlertScreen("Upload failed", str(e)))
            return
        self._refresh_attachments()
        self.notify(f"Attached {path.name} ({ref})", timeout=2)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "model-select":
            value = event.value if isinstance(event.value, str) else ""
            self._client.select_model(value or None)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id == "session-list" and event.option.id is not None:
            self._open_session(event.option.id)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-chat":
            self.action_new_chat()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._client.loading:
            return
        self._send(event.value, event.system_prompt)

    def on_chat_input_bar_attach_requested(self, event: ChatInputBar.AttachRequested) -> None:
        def _on_path(path: Path | None) -> None:
            if path is not None:
                self._upload(path, event.photo)

        self.push_screen(AttachScreen(photo=event.photo), callback=_on_path)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_new_chat(self) -> None:
        """Start a new, unsaved chat."""
        self._client.new_session()
        self._refresh_sessions()
        self._refresh_timeline()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_cancel_send(self) -> None:
        """Cancel the in-flight send."""
        if self._client.cancel():
            self.notify("Cancelled", severity="warning", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_toggle_theme(self) -> None:
        """Switch between the light and dark palettes."""
        self._dark = not self._dark
        self.theme = OCEAN_DARK.name if self._dark else OCEAN_LIGHT.name


async def run_textual_tui(
    client: ChatClient,
    log_level: str | None = None,
    dark: bool = False,
) -> None:
    """Run the Textual TUI.

    Args:
        client: Chat client (its backend is closed when the app exits)
        log_level: Log level for panel (debug/info/warning/error), None to hide
        dark: Start with the dark theme
    """
    app = ChatSyncApp(client=client, log_level=log_level, dark=dark)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(BaseException):
            await client.close()
