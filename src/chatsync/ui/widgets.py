"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management and attachment buttons
- Session list rendering
- Chat message rendering and incremental updates
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widget import Widget
from textual.widgets import Button, Input, Markdown, OptionList, RichLog, Static, TextArea
from textual.widgets.option_list import Option

from ..state.models import Message, MessageRole, Session
from .config import INPUT_HISTORY_MAX_SIZE, LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, LogLevel
from .formatting import message_footer, message_header, session_subtitle, session_title


def _copy_text(widget: Widget, text: str, what: str) -> None:
    """Copy text to the system clipboard, falling back to the terminal (OSC 52)."""
    try:
        import pyperclip
        pyperclip.copy(text)
        widget.app.notify(f"{what} copied", timeout=2)
    except Exception:
        widget.app.copy_to_clipboard(text)
        widget.app.notify(f"{what} copied (terminal)", timeout=2)


class ClickableMessage(Vertical):
    """A chat message container that copies its content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        _copy_text(self, self._content, "Message")


class ChatInputBar(Vertical):
    """Message area, optional system prompt, attachment buttons and Send."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str, system_prompt: str | None) -> None:
            super().__init__()
            self.value = value
            self.system_prompt = system_prompt

    class AttachRequested(TextualMessage):
        """Message sent when user wants to attach a file or photo."""

        def __init__(self, photo: bool) -> None:
            super().__init__()
            self.photo = photo

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        with Horizontal(id="input-controls"):
            yield Input(placeholder="Optional system prompt", id="system-prompt")
            yield Button("File", id="attach-file").with_tooltip("Upload file")
            yield Button("Photo", id="attach-photo").with_tooltip("Upload photo")
            yield Button("Send →", id="send-btn", variant="success").with_tooltip(
                "Submit message (Ctrl+J)"
            )
        yield Static("", id="attachments-label")

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False
        self.query_one("#attachments-label", Static).display = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id in ("attach-file", "attach-photo"):
            self.post_message(self.AttachRequested(photo=event.button.id == "attach-photo"))

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.has_focus and text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        last_row = len(lines) - 1
        last_col = len(lines[-1]) if lines else 0
        return text_area.has_focus and text_area.cursor_location == (last_row, last_col)

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self.disabled:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        system_prompt = self.query_one("#system-prompt", Input).value.strip() or None
        self.post_message(self.Submitted(value, system_prompt))

    def show_attachments(self, refs: list[str]) -> None:
        label = self.query_one("#attachments-label", Static)
        label.update(f"Attached IDs: {', '.join(refs)}")
        label.display = bool(refs)

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class SessionList(OptionList):
    """Session history, newest first, with the current session marked."""

    BORDER_TITLE = "History"

    def set_sessions(self, sessions: list[Session], current_id: str | None) -> None:
        """Rebuild the list from the session store."""
        self.clear_options()
        if not sessions:
            self.add_option(Option(Text("No sessions yet", style="dim italic"), disabled=True))
            return

        options = []
        for session in sessions:
            marker = "▌" if session.session_id == current_id else " "
            prompt = Text.assemble(
                (f"{marker} {session_title(session)}", "bold"),
                "\n",
                (f"  {session_subtitle(session)}", "dim"),
            )
            options.append(Option(prompt, id=session.session_id))
        self.add_options(options)

        if current_id is not None:
            for index, session in enumerate(sessions):
                if session.session_id == current_id:
                    self.highlighted = index
                    break


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history mirroring the message timeline."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True
    ALLOW_SELECT = True

    EMPTY_TEXT = (
        "Start a conversation\n\n"
        "Choose a model, optionally upload files or photos, and send your message."
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered_ids: list[str] = []
        self._messages: list[Message] = []

    def on_mount(self) -> None:
        self._show_empty_state()

    def sync(self, messages: list[Message]) -> None:
        """Bring the display in line with the timeline.

        Appends new messages when the timeline only grew; re-renders
        everything when it was replaced.
        """
        ids = [m.id for m in messages]
        if ids == self._rendered_ids:
            return

        if not self._rendered_ids or ids[:len(self._rendered_ids)] != self._rendered_ids:
            self.remove_children()
            self._rendered_ids = []

        for msg in messages[len(self._rendered_ids):]:
            self._render_message(msg)
            self._rendered_ids.append(msg.id)
        self._messages = list(messages)

        if not messages:
            self._show_empty_state()
            self.border_subtitle = "Conversation history"
        else:
            self.border_subtitle = f"{len(messages)} messages"
            self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for msg in reversed(self._messages):
            if msg.role == MessageRole.ASSISTANT and not msg.is_error:
                return msg.content
        return None

    def _show_empty_state(self) -> None:
        self.mount(Static(self.EMPTY_TEXT, classes="empty-state"))

    def _render_message(self, msg: Message) -> None:
        """Render a single message to the display."""
        if msg.role == MessageRole.USER:
            border_class = "user-message"
        elif msg.is_error:
            border_class = "error-message"
        else:
            border_class = "assistant-message"

        container = ClickableMessage(content=msg.content, classes=f"chat-message {border_class}")
        container.compose_add_child(Static(message_header(msg), classes="message-header"))

        if msg.role == MessageRole.ASSISTANT and not msg.is_error:
            container.compose_add_child(Markdown(msg.content, classes="message-content"))
        else:
            container.compose_add_child(Static(msg.content, classes="message-content", markup=False))

        footer = message_footer(msg)
        if footer:
            container.compose_add_child(Static(footer, classes="message-footer", markup=False))

        self.mount(container)


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        """Update subtitle to show current log level."""
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Send, Sessions, HTTP, etc.)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "cyan",
            "HTTP": "magenta",
            "Send": "green",
            "Sessions": "bright_blue",
            "Timeline": "bright_cyan",
            "Models": "bright_magenta",
            "Upload": "yellow",
            "Boot": "bright_green",
        }
        level_color = level_colors.get(level, "white")
        comp_color = component_colors.get(component, "white")

        self.write(
            Text.assemble(
                (f"{timestamp} ", "dim"),
                (f"{LogLevel.name(level):<5} ", level_color),
                (f"[{component}] ", comp_color),
                message,
            )
        )

    def trace(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: ``(level, component, message)``."""
        self.log(component, message, LogLevel.from_string(level))

    def info(self, component: str, message: str) -> None:
        """Log an INFO level message."""
        self.log(component, message, LogLevel.INFO)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        else:
            self.show()
            return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        _copy_text(self, text, "Log")
