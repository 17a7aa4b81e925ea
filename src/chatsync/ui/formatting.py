"""Text formatting helpers shared by the TUI and the CLI.

Hides how timestamps, session labels and message metadata are shown.
"""

from datetime import datetime

from ..state.models import Message, MessageRole, ModelInfo, Session
from .config import AUTO_MODEL_LABEL, MESSAGE_TIME_FORMAT, SESSION_TIME_FORMAT, UNTITLED_SESSION


def local_time(value: datetime, fmt: str = SESSION_TIME_FORMAT) -> str:
    """Format an aware datetime in the local timezone."""
    return value.astimezone().strftime(fmt)


def session_title(session: Session) -> str:
    return session.title or UNTITLED_SESSION


def session_subtitle(session: Session) -> str:
    return local_time(session.updated_at or session.created_at)


def model_label(model: ModelInfo) -> str:
    """Label for the model selector, e.g. ``gpt-x • openai (degraded)``."""
    label = f"{model.name} • {model.provider}" if model.provider else model.name
    if not model.available:
        label += f" ({model.status})"
    return label


def model_options(models: list[ModelInfo]) -> list[tuple[str, str]]:
    """(label, value) pairs for the model selector; '' stands for automatic routing."""
    return [(AUTO_MODEL_LABEL, "")] + [(model_label(m), m.name) for m in models]


def message_header(message: Message) -> str:
    if message.role == MessageRole.USER:
        icon, author = ">", "You"
    else:
        icon, author = "<", "Assistant"
    header = f"{icon} {author} [{local_time(message.created_at, MESSAGE_TIME_FORMAT)}]"
    if message.is_provisional:
        header += " (sending)"
    return header


def message_footer(message: Message) -> str | None:
    """Attachment list and model line shown under a message body."""
    lines = []
    if message.attachments:
        lines.append("Attachments:")
        lines.extend(f"  • {attachment.label}" for attachment in message.attachments)
    if message.model and message.role == MessageRole.ASSISTANT:
        lines.append(f"Model: {message.model}")
    return "\n".join(lines) if lines else None


def provider_status(provider: str, healthy: bool) -> str:
    """Header subtitle describing the backend provider."""
    marker = "●" if healthy else "○"
    name = f"Provider: {provider}" if provider else "Provider: unknown"
    state = "healthy" if healthy else "unavailable"
    return f"{marker} {name} | {state}"
