"""Modal screens for the TUI.

This module hides the design decisions about:
- Alert and prompt dialog appearance (CSS, layout)
- Button styling and variants
- Keyboard shortcuts for dialogs

To change how dialogs look, modify only this file.
"""

from pathlib import Path

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

DIALOG_CSS = """
AlertScreen, AttachScreen {
    align: center middle;
    background: $background 70%;
}

.dialog {
    width: 64;
    height: auto;
    max-height: 20;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}

.dialog-title {
    width: 100%;
    height: auto;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
    border-bottom: solid $border;
    margin-bottom: 1;
}

.dialog-body {
    width: 100%;
    height: auto;
    padding: 1 2;
    background: $panel;
    border: round $border;
    color: $foreground;
    margin-bottom: 1;
}

.dialog-buttons {
    width: 100%;
    height: 3;
    align: center middle;
    margin-top: 1;
}

.dialog-buttons Button {
    margin: 0 1;
    min-width: 10;
}
"""


class AlertScreen(ModalScreen[None]):
    """Blocking alert; the user has to acknowledge it before continuing.

    Used for upload failures, which are reported apart from the chat.
    """

    CSS = DIALOG_CSS

    BINDINGS = [
        Binding("enter", "dismiss_alert", "OK", show=False),
        Binding("escape", "dismiss_alert", "OK", show=False),
    ]

    def __init__(self, title: str, message: str) -> None:
        super().__init__()
        self._title = title
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog error-dialog"):
            yield Static(self._title, classes="dialog-title")
            yield Static(self._message, classes="dialog-body", markup=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("OK", id="btn-ok", variant="error")

    def on_mount(self) -> None:
        self.query_one("#btn-ok", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_dismiss_alert(self) -> None:
        self.dismiss(None)


class AttachScreen(ModalScreen[Path | None]):
    """Asks for the path of a file or photo to upload.

    Dismisses with the expanded path, or None when cancelled.
    """

    CSS = DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, photo: bool = False) -> None:
        super().__init__()
        self._photo = photo

    def compose(self) -> ComposeResult:
        kind = "photo" if self._photo else "file"
        with Vertical(classes="dialog"):
            yield Static(f"Upload {kind}", classes="dialog-title")
            yield Input(placeholder=f"Path to the {kind}", id="attach-path")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Upload", id="btn-upload", variant="primary")
                yield Button("Cancel", id="btn-cancel")

    def on_mount(self) -> None:
        self.query_one("#attach-path", Input).focus()

    def _confirm(self) -> None:
        value = self.query_one("#attach-path", Input).value.strip()
        self.dismiss(Path(value).expanduser() if value else None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._confirm()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-upload":
            self._confirm()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
