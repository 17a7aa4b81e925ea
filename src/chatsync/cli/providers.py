"""Client factory functions for CLI.

Centralizes creation of the config and chat client from environment
variables and command-line overrides. Hides configuration details from
command implementations.
"""

from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from ..client import ChatClient
from ..config import ClientConfig
from ..ui.config import LogLevel

# Traces go to stderr so command output stays clean
_err_console = Console(stderr=True)

_LEVEL_STYLES = {
    "debug": "dim",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


def get_config(
    api_base: str | None = None,
    timeout: float | None = None,
    log_level: str | None = None,
) -> ClientConfig:
    """Create the client config from environment variables.

    Args:
        api_base: Service URL overriding CHATSYNC_API_BASE
        timeout: HTTP timeout overriding CHATSYNC_REQUEST_TIMEOUT
        log_level: Trace level overriding CHATSYNC_LOG_LEVEL

    Returns:
        Client configuration

    Environment variables:
        CHATSYNC_API_BASE: Service URL (default: http://localhost:8000)
        CHATSYNC_REQUEST_TIMEOUT: HTTP timeout in seconds (default: 30)
        CHATSYNC_SEND_TIMEOUT: Send timeout in seconds (default: 120)
        CHATSYNC_LOG_LEVEL: Trace level (default: unset)
    """
    return ClientConfig.from_env(
        api_base=api_base,
        request_timeout=timeout,
        log_level=log_level,
    )


def get_client(config: ClientConfig, console: Console | None = None) -> ChatClient:
    """Create a chat client, with traces printed when a log level is set.

    Args:
        config: Client configuration
        console: Optional Rich console for traces (default: stderr)

    Returns:
        Chat client instance
    """
    client = ChatClient.from_config(config)
    if config.log_level:
        client.set_debug_callback(trace_printer(config.log_level, console))
    return client


def trace_printer(
    log_level: str,
    console: Console | None = None,
) -> Callable[[str, str, str], None]:
    """Build a debug callback printing traces at or above ``log_level``."""
    con = console or _err_console
    threshold = LogLevel.from_string(log_level)

    def _trace(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        style = _LEVEL_STYLES.get(level.lower(), "white")
        con.print(
            f"[{style}]{level.upper():<7}[/{style}] [bold]{component}[/bold]: {escape(message)}",
            highlight=False,
        )

    return _trace
