"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..api import ChatApiError
from ..client import ChatClient
from ..config import ClientConfig
from ..state import Message, MessageRole, SendStatus, UploadError
from ..ui.formatting import (
    local_time,
    message_footer,
    message_header,
    provider_status,
    session_title,
)
from .providers import get_client, get_config

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chatsync",
    help="Terminal client for an HTTP chat service with sessions and model routing",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.callback()
def main_options(
    ctx: typer.Context,
    api_base: str | None = typer.Option(
        None,
        "--api-base",
        "-a",
        help="Chat service URL (default: $CHATSYNC_API_BASE or http://localhost:8000)"
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="HTTP request timeout in seconds (0 disables)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show traces with level: debug (all), info, warning, or error"
    ),
):
    """Talk to a chat service from the terminal."""
    ctx.obj = get_config(api_base=api_base, timeout=timeout, log_level=log_level)


def _config(ctx: typer.Context) -> ClientConfig:
    return ctx.obj if isinstance(ctx.obj, ClientConfig) else get_config()


def _print_message(message: Message) -> None:
    style = "cyan" if message.role == MessageRole.USER else "green"
    if message.is_error:
        style = "red"
    body = escape(message.content)
    footer = message_footer(message)
    if footer:
        footer = f"[dim]{escape(footer)}[/dim]"
        body = f"{body}\n\n{footer}" if body else footer
    console.print(Panel(
        body,
        title=escape(message_header(message)),
        title_align="left",
        border_style=style,
    ))


@app.command()
def models(ctx: typer.Context):
    """List the models offered by the service."""
    async def _models():
        async with get_client(_config(ctx)) as client:
            listing = await client.registry.load()

            console.print(f"[dim]{provider_status(listing.provider, listing.healthy)}[/dim]\n")

            if not listing.healthy:
                console.print("[red]Error: model provider unavailable[/red]")
                raise typer.Exit(code=1)

            if not listing.models:
                console.print("[yellow]No models available[/yellow]")
                return

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("", width=1)
            table.add_column("Model", style="cyan")
            table.add_column("Provider", style="yellow")
            table.add_column("Status", style="green")

            for model in client.registry.models:
                status = model.status if model.available else f"[red]{model.status}[/red]"
                table.add_row("*" if model.selected else "", model.name, model.provider, status)

            console.print(table)

    asyncio.run(_models())


@app.command()
def sessions(ctx: typer.Context):
    """List chat sessions, most recently active first."""
    async def _sessions():
        async with get_client(_config(ctx)) as client:
            items = await client.sessions.bootstrap()

            if not items:
                console.print("[yellow]No sessions yet[/yellow]")
                return

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Title", style="cyan")
            table.add_column("Session ID", style="dim")
            table.add_column("Updated", style="green", width=16)

            for session in items:
                table.add_row(
                    session_title(session),
                    session.session_id,
                    local_time(session.updated_at or session.created_at),
                )

            console.print(table)

    asyncio.run(_sessions())


@app.command()
def history(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session to show")
):
    """Print the messages of a session."""
    async def _history():
        async with get_client(_config(ctx)) as client:
            try:
                listing = await client.backend.load_messages(session_id)
            except ChatApiError as e:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)

            if not listing.messages:
                console.print("[yellow]No messages in this session[/yellow]")
                return

            for message in listing.messages:
                _print_message(message)

    asyncio.run(_history())


@app.command()
def send(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message to send"),
    session: str | None = typer.Option(
        None,
        "--session",
        "-s",
        help="Continue this session (default: start a new one)"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use (default: the service's choice)"
    ),
    system: str | None = typer.Option(
        None,
        "--system",
        help="System prompt for this message"
    ),
    attach: list[Path] | None = typer.Option(
        None,
        "--attach",
        help="File to upload and attach (repeatable)"
    ),
    photo: list[Path] | None = typer.Option(
        None,
        "--photo",
        help="Photo to upload and attach (repeatable)"
    ),
):
    """Send one message and print the conversation."""
    async def _send():
        async with get_client(_config(ctx)) as client:
            await client.bootstrap()

            if model:
                client.select_model(model)
                if client.registry.current_selection() is None:
                    console.print(f"[yellow]Unknown model '{model}', using automatic routing[/yellow]")

            if session:
                await client.select_session(session)

            uploads = [(path, False) for path in attach or []] + [(path, True) for path in photo or []]
            for path, is_photo in uploads:
                try:
                    ref = await client.upload(path, photo=is_photo)
                except UploadError as e:
                    console.print(f"[red]{escape(str(e))}[/red]")
                    raise typer.Exit(code=1)
                console.print(f"[dim]Attached {path.name} ({ref})[/dim]")

            outcome = await client.send(message, system_prompt=system)

            if outcome.status == SendStatus.REJECTED:
                console.print(f"[red]Error: {outcome.error}[/red]")
                raise typer.Exit(code=1)

            for item in client.messages:
                _print_message(item)

            if outcome.session_id:
                console.print(f"[dim]Session: {outcome.session_id}[/dim]")

            if not outcome.ok:
                raise typer.Exit(code=1)

    asyncio.run(_send())


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to upload"),
    photo: bool = typer.Option(
        False,
        "--photo",
        "-p",
        help="Upload as a photo"
    ),
):
    """Upload a file and print its attachment id."""
    async def _upload():
        async with get_client(_config(ctx)) as client:
            try:
                ref = await client.upload(path, photo=photo)
            except UploadError as e:
                console.print(f"[red]{escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            console.print(ref)

    asyncio.run(_upload())


@app.command(name="tui")
def tui_command(
    ctx: typer.Context,
    dark: bool = typer.Option(
        False,
        "--dark",
        "-d",
        help="Start with the dark theme"
    ),
):
    """Launch interactive TUI chat interface."""
    config = _config(ctx)

    async def _tui():
        from ..ui import run_textual_tui

        # Traces go to the log panel, not the terminal
        client = ChatClient.from_config(config)
        await run_textual_tui(client, log_level=config.log_level, dark=dark)
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
