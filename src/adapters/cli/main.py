"""
adapters.cli.main - CLI adapter for the mood journal.

Mirrors src/adapters/rest/ but for terminal use. Uses the same
ServiceFactory and services as the REST API so behaviour (auth, entries,
analytics, chat, suggestion cache) is identical.

Commands
--------
  init-db      Create the database schema and upload directory
  register     Create a new account
  login        Sign in and save credentials locally (~/.mood-journal/session.json)
  logout       Clear stored credentials
  whoami       Show the currently signed-in account
  post         Add a journal entry from an image file
  entries      List your entries, newest first
  delete       Delete one of your entries
  analytics    Show mood statistics and suggestions
  chat         Interactive chat session
  history      Show recent chat messages
  clear-cache  Forget cached suggestions

Usage
-----
  python run_cli.py login
  python run_cli.py post photo.jpg --caption "Sunny walk" --tag Happy --tag Calm
  python run_cli.py analytics
"""

from __future__ import annotations

import asyncio
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

# Ensure src/ is on the path
_SRC = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_SRC))

import typer
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from adapters.cli.session import Session, clear_session, load_session, save_session
from application.context import SessionContext
from application.dto import LoginRequest, NewEntryRequest, RegisterRequest
from domain.entities import Entry
from domain.exceptions import (
    AuthenticationError,
    DuplicateLoginError,
    EntryNotFoundError,
    InvalidInputError,
)
from domain.models import MOOD_TAGS, SUGGESTION_CATEGORIES, SuggestionBundle, TRAIT_NAMES
from factory import ServiceFactory
from infrastructure.config import Settings, configure_logging

__version__ = "0.1.0"

console = Console()
app = typer.Typer(
    help="Mood Journal CLI",
    add_completion=False,
    no_args_is_help=True,
)

_MOOD_STYLE = {
    "very_happy": "bold green",
    "happy": "green",
    "neutral": "yellow",
    "sad": "magenta",
    "very_sad": "bold red",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _require_session() -> Session:
    """Return the stored session or exit with a user-friendly error."""
    session = load_session()
    if session is None:
        console.print(
            "[bold red]Not logged in.[/bold red] "
            "Run [bold]login[/bold] (or [bold]register[/bold]) first."
        )
        raise typer.Exit(code=1)
    return session


async def _make_factory() -> ServiceFactory:
    config = Settings.from_env()
    configure_logging("WARNING" if config.log_level.upper() == "INFO" else config.log_level)
    factory = ServiceFactory(config)
    await factory.initialize()
    return factory


def _build_ctx(session: Session, factory: ServiceFactory) -> SessionContext:
    """Check the stored token and build a SessionContext from it."""
    auth_svc = factory.create_authentication_service()
    try:
        payload = auth_svc.verify_token(session.access_token)
    except AuthenticationError:
        console.print(
            "[bold red]Session expired.[/bold red] Run [bold]login[/bold] again."
        )
        raise typer.Exit(code=1)
    return SessionContext(user_id=payload["user_id"], email=payload.get("email", ""))


def _mood(entry: Entry) -> str:
    value = entry.overall_mood.value
    return f"[{_MOOD_STYLE.get(value, 'white')}]{value}[/]"


def _suggestion_table(bundle: SuggestionBundle, title: str) -> Table:
    t = Table(title=title, box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Category", style="bold")
    t.add_column("Suggestions")
    for name in SUGGESTION_CATEGORIES:
        items = getattr(bundle, name)
        t.add_row(name.capitalize(), "\n".join(items) if items else "[dim]none[/dim]")
    return t


def _print_entry(entry: Entry) -> None:
    traits = "  ".join(
        f"{name}: [bold]{value}[/bold]" for name, value in entry.traits.to_dict().items()
    )
    body = (
        f"[bold]{entry.caption}[/bold]\n"
        f"{entry.mood_description}\n\n"
        f"Mood: {_mood(entry)}   Tags: {', '.join(entry.tags) or '[dim]none[/dim]'}\n"
        f"{traits}\n"
        f"[dim]{entry.image_url}[/dim]"
    )
    console.print(Panel(body, title=f"Entry #{entry.id}", border_style="blue"))
    if entry.suggestions is not None:
        console.print(_suggestion_table(entry.suggestions, "Suggestions for this entry"))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"mood-journal v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Commands: Setup
# ---------------------------------------------------------------------------

@app.command("init-db")
def init_db() -> None:
    """Create the database schema and upload directory."""
    async def _run() -> None:
        factory = await _make_factory()
        console.print(Panel(
            "[bold green]Database ready.[/bold green]\n"
            f"DB: {factory.config.db_path}\n"
            f"Uploads: {factory.config.upload_dir}",
            border_style="green",
        ))

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Auth
# ---------------------------------------------------------------------------

@app.command()
def register() -> None:
    """Create a new account."""
    console.print(Panel("[bold]Create Account[/bold]", border_style="blue"))

    email = Prompt.ask("[bold]Email[/bold]")
    password = Prompt.ask("[bold]Password[/bold]   (min 6 chars)", password=True)
    name = Prompt.ask("[bold]Name[/bold]")

    if len(password) < 6 or not name.strip() or "@" not in email:
        console.print("[bold red]Invalid input.[/bold red] Check email, password and name.")
        raise typer.Exit(code=1)

    async def _run() -> None:
        factory = await _make_factory()
        auth_svc = factory.create_authentication_service()
        try:
            token = await auth_svc.register(RegisterRequest(
                email=email, password=password, name=name,
            ))
        except DuplicateLoginError:
            console.print(f"[bold red]Email '{email}' is already registered.[/bold red]")
            raise typer.Exit(code=1)

        save_session(Session(
            user_id=token.user_id,
            access_token=token.access_token,
            email=token.email,
            name=token.name,
        ))
        console.print(Panel(
            f"[bold green]Account created and logged in![/bold green]\n"
            f"Welcome, [bold]{token.name}[/bold].\n"
            "Run [bold]post[/bold] to add your first entry.",
            border_style="green",
        ))

    asyncio.run(_run())


@app.command()
def login() -> None:
    """Sign in to your account."""
    email = Prompt.ask("[bold]Email[/bold]")
    password = Prompt.ask("[bold]Password[/bold]", password=True)

    async def _run() -> None:
        factory = await _make_factory()
        auth_svc = factory.create_authentication_service()
        try:
            token = await auth_svc.login(LoginRequest(email=email, password=password))
        except AuthenticationError:
            console.print(
                "[bold red]Login failed.[/bold red] Check your email and password."
            )
            raise typer.Exit(code=1)

        save_session(Session(
            user_id=token.user_id,
            access_token=token.access_token,
            email=token.email,
            name=token.name,
        ))
        console.print(Panel(
            f"[bold green]Logged in![/bold green] Welcome back, [bold]{token.name}[/bold].",
            border_style="green",
        ))

    asyncio.run(_run())


@app.command()
def logout() -> None:
    """Sign out and clear stored credentials."""
    session = load_session()
    if session is None:
        console.print("[dim]Not currently logged in.[/dim]")
        return
    label = session.email or f"user #{session.user_id}"
    if Confirm.ask(f"Sign out [bold]{label}[/bold]?"):
        clear_session()
        console.print("[green]Logged out.[/green]")


@app.command()
def whoami() -> None:
    """Show the currently signed-in account."""
    session = load_session()
    if session is None:
        console.print("[dim]Not logged in.[/dim]")
        return
    console.print(
        f"Logged in as [bold]{session.name or '?'}[/bold] "
        f"<{session.email}> (user_id={session.user_id})"
    )


# ---------------------------------------------------------------------------
# Commands: Entries
# ---------------------------------------------------------------------------

@app.command()
def post(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image file."),
    caption: str = typer.Option(..., "--caption", "-c", help="What is going on?"),
    tag: Optional[List[str]] = typer.Option(
        None, "--tag", "-t", help=f"Mood tag, repeatable. One of: {', '.join(MOOD_TAGS)}",
    ),
) -> None:
    """Add a journal entry from an image file."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        service = factory.create_entry_service()
        content_type = mimetypes.guess_type(image.name)[0] or "application/octet-stream"

        with console.status("[bold cyan]Analyzing your mood…", spinner="dots"):
            try:
                entry = await service.create_entry(ctx, NewEntryRequest(
                    image=image.read_bytes(),
                    filename=image.name,
                    content_type=content_type,
                    caption=caption,
                    tags=list(tag or []),
                ))
            except InvalidInputError as exc:
                console.print(f"[bold red]{exc}[/bold red]")
                raise typer.Exit(code=1)

        _print_entry(entry)

    asyncio.run(_run())


@app.command()
def entries() -> None:
    """List your entries, newest first."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        items = await factory.create_entry_service().list_entries(ctx)
        if not items:
            console.print("[dim]No entries yet. Run [bold]post[/bold] to add one.[/dim]")
            return

        t = Table(box=box.SIMPLE_HEAVY)
        t.add_column("#", justify="right")
        t.add_column("Date")
        t.add_column("Caption")
        t.add_column("Mood")
        t.add_column("Tags")
        for e in items:
            t.add_row(str(e.id), e.created_at[:16].replace("T", " "), e.caption, _mood(e), ", ".join(e.tags))
        console.print(t)

    asyncio.run(_run())


@app.command()
def delete(
    entry_id: int = typer.Argument(..., help="Entry number from the entries list."),
) -> None:
    """Delete one of your entries."""
    session = _require_session()
    if not Confirm.ask(f"Delete entry [bold]#{entry_id}[/bold]?"):
        return

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        try:
            await factory.create_entry_service().delete_entry(ctx, entry_id)
        except EntryNotFoundError:
            console.print(f"[bold red]Entry #{entry_id} not found.[/bold red]")
            raise typer.Exit(code=1)
        console.print("[green]Entry deleted.[/green]")

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Analytics / suggestions
# ---------------------------------------------------------------------------

@app.command()
def analytics() -> None:
    """Show mood statistics and personalised suggestions."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        with console.status("[bold cyan]Crunching your entries…", spinner="dots"):
            report = await factory.create_analytics_service().summarize(ctx)

        if report.total_entries == 0:
            console.print("[dim]No entries yet, nothing to analyze.[/dim]")
            return

        t = Table(title=f"Averages over {report.total_entries} entries", box=box.SIMPLE)
        t.add_column("Trait", style="bold")
        t.add_column("Average", justify="right")
        t.add_column("Recent (oldest → newest)")
        for name in TRAIT_NAMES:
            t.add_row(
                name,
                f"{report.average_scores[name]:.1f}",
                " ".join(str(v) for v in report.recent_trends[name]),
            )
        console.print(t)

        dist = Table(title="Mood distribution", box=box.SIMPLE, show_header=False)
        dist.add_column("Mood")
        dist.add_column("Count", justify="right")
        for mood, count in report.mood_distribution.items():
            dist.add_row(f"[{_MOOD_STYLE[mood]}]{mood}[/]", str(count))
        console.print(dist)

        if report.top_mood_descriptions:
            console.print(Panel(
                "\n\n".join(report.top_mood_descriptions),
                title="Recent mood descriptions",
                border_style="magenta",
            ))
        console.print(_suggestion_table(report.suggestions, "Suggestions for you"))

    asyncio.run(_run())


@app.command("clear-cache")
def clear_cache() -> None:
    """Forget cached suggestions so the next analytics run regenerates them."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        await factory.create_suggestion_service().clear_cache(ctx)
        console.print("[green]Suggestion cache cleared.[/green]")

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Chat
# ---------------------------------------------------------------------------

@app.command()
def chat() -> None:
    """Start an interactive chat session (requires login)."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        service = factory.create_chat_service()

        label = session.name or session.email or f"user #{session.user_id}"
        console.print(Panel(
            f"[bold]Mood Journal Chat[/bold]\n"
            f"Logged in as [bold]{label}[/bold]\n"
            "Type your message, or [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        ))

        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if user_input.strip().lower() in ("exit", "quit", "q", "bye"):
                console.print("[dim]Goodbye![/dim]")
                break

            if not user_input.strip():
                continue

            with console.status("[bold cyan]Thinking…", spinner="dots"):
                reply = await service.send(ctx, user_input)

            console.print()
            console.print(Panel(Markdown(reply.content), title="Assistant", border_style="green"))

    asyncio.run(_run())


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", min=1, max=50, help="Messages to show."),
) -> None:
    """Show your most recent chat messages."""
    session = _require_session()

    async def _run() -> None:
        factory = await _make_factory()
        ctx = _build_ctx(session, factory)
        messages = await factory.create_chat_service().history(ctx, limit=limit)
        if not messages:
            console.print("[dim]No messages yet. Run [bold]chat[/bold] to start.[/dim]")
            return
        for m in messages:
            who = "[bold cyan]You[/bold cyan]" if m.role == "user" else "[bold green]Assistant[/bold green]"
            console.print(f"{who} [dim]{m.created_at[:16].replace('T', ' ')}[/dim]\n{m.content}\n")

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Global version option
# ---------------------------------------------------------------------------

@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Mood Journal CLI"""


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
