"""Unit tests for UI helpers that do not need a running app."""
import io

import pytest
from rich.console import Console

from chatsync.cli.providers import trace_printer
from chatsync.state.models import Attachment, Message, MessageRole, ModelInfo
from chatsync.ui.config import LogLevel
from chatsync.ui.formatting import message_footer, model_options
from chatsync.ui.widgets import DebugPanel


class TestDebugPanel:
    """Tests for DebugPanel level handling."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("debug", LogLevel.DEBUG),
            ("info", LogLevel.INFO),
            ("warning", LogLevel.WARNING),
            ("ERROR", LogLevel.ERROR),
            ("verbose", LogLevel.DEBUG),
        ],
    )
    def test_trace_maps_level_names(self, level, expected):
        panel = DebugPanel()
        calls = []
        panel.log = lambda component, message, level=LogLevel.DEBUG: calls.append(
            (component, message, level)
        )

        panel.trace(level, "Send", "hello")

        assert calls == [("Send", "hello", expected)]


class TestTracePrinter:
    """Tests for the CLI trace callback."""

    def test_filters_below_threshold(self):
        buffer = io.StringIO()
        trace = trace_printer("warning", Console(file=buffer, width=120))

        trace("debug", "HTTP", "GET /models")
        trace("info", "Models", "Loaded 2 model(s)")
        trace("error", "Send", "Error: API 500: [boom]")

        output = buffer.getvalue()
        assert "GET /models" not in output
        assert "Loaded" not in output
        assert "Error: API 500: [boom]" in output


class TestFormatting:
    """Tests for shared label formatting."""

    def test_model_options_start_with_auto(self):
        options = model_options([ModelInfo(name="gpt-x", provider="openai", status="degraded")])

        assert options[0] == ("Auto", "")
        assert options[1] == ("gpt-x • openai (degraded)", "gpt-x")

    def test_footer_lists_attachments_and_model(self):
        message = Message(
            id="m1",
            role=MessageRole.ASSISTANT,
            content="done",
            model="gpt-x",
            attachments=[Attachment(id="att-1", filename="a.pdf")],
        )

        assert message_footer(message) == "Attachments:\n  • a.pdf\nModel: gpt-x"

    def test_no_footer_for_plain_user_message(self):
        message = Message(id="m1", role=MessageRole.USER, content="hi", model="gpt-x")

        assert message_footer(message) is None
