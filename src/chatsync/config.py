"""Client configuration.

Centralizes the service URL and timeout settings, read from the
environment (``.env`` files are loaded by the CLI before this runs).
"""

import os

from pydantic import BaseModel, Field, field_validator

DEFAULT_API_BASE = "http://localhost:8000"


class ClientConfig(BaseModel):
    """Settings for talking to the chat service."""

    api_base: str = Field(default=DEFAULT_API_BASE, description="Root URL of the chat service")
    request_timeout: float | None = Field(
        default=30.0,
        description="Per-request HTTP timeout in seconds (None disables it)"
    )
    send_timeout: float | None = Field(
        default=120.0,
        description="Upper bound for one send, including the model's reply (None disables it)"
    )
    log_level: str | None = Field(
        default=None,
        description="Trace level (debug/info/warning/error); None hides traces"
    )

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") or DEFAULT_API_BASE

    @field_validator("request_timeout", "send_timeout")
    @classmethod
    def zero_disables(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            return None
        return v

    @classmethod
    def from_env(cls, **overrides: object) -> "ClientConfig":
        """Build a config from environment variables.

        Environment variables:
            CHATSYNC_API_BASE: Service URL (default: http://localhost:8000)
            CHATSYNC_REQUEST_TIMEOUT: HTTP timeout in seconds (default: 30, 0 disables)
            CHATSYNC_SEND_TIMEOUT: Send timeout in seconds (default: 120, 0 disables)
            CHATSYNC_LOG_LEVEL: Trace level (default: unset)

        Args:
            **overrides: Values taking precedence over the environment; None is ignored
        """
        values: dict[str, object] = {}
        if api_base := os.getenv("CHATSYNC_API_BASE"):
            values["api_base"] = api_base
        if request_timeout := os.getenv("CHATSYNC_REQUEST_TIMEOUT"):
            values["request_timeout"] = float(request_timeout)
        if send_timeout := os.getenv("CHATSYNC_SEND_TIMEOUT"):
            values["send_timeout"] = float(send_timeout)
        if log_level := os.getenv("CHATSYNC_LOG_LEVEL"):
            values["log_level"] = log_level
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
