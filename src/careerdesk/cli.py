"""Command line interface for careerdesk."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from careerdesk.app import build_controller
from careerdesk.config import Settings, load_settings
from careerdesk.core.controller import ReplyController
from careerdesk.core.types import ReplyResult
from careerdesk.errors import CareerDeskError, ConfigurationError
from careerdesk.logging_utils import configure_logging

EXIT_COMMANDS = frozenset({"quit", "exit", "q"})

app = typer.Typer(
    name="careerdesk",
    help="Self-reviewing career assistant.",
    add_completion=False,
    rich_markup_mode="rich",
)


class Renderer:
    """Terminal output using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    def welcome(self, model: str) -> None:
        self.console.print("[bold blue]careerdesk[/bold blue] - type 'quit' to leave.")
        self.console.print(f"[bold]Model:[/bold] [magenta]{model}[/magenta]")

    def reply(self, result: ReplyResult, *, show_log: bool = False) -> None:
        self.console.print(f"[bold yellow]Assistant:[/bold yellow] {result.reply}")
        self.console.print(f"[dim]confidence={result.confidence:.2f} revisions={len(result.evaluation_log)}[/dim]")
        if not show_log:
            return
        for attempt in result.evaluation_log:
            verdict = "accepted" if attempt.evaluation.is_acceptable else "rejected"
            self.console.print(
                f"[dim]#{attempt.revision} {verdict} {attempt.evaluation.confidence:.2f} "
                f"{attempt.evaluation.feedback}[/dim]"
            )

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    async def get_user_input(self) -> str:
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async("employer> ")


def _settings_or_exit(renderer: Renderer, context_dir: Path | None = None) -> Settings:
    try:
        return load_settings(context_dir)
    except ConfigurationError as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc


def _controller_or_exit(renderer: Renderer, settings: Settings) -> ReplyController:
    try:
        return build_controller(settings)
    except ConfigurationError as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc


@app.command()
def ask(
    message: str = typer.Argument(..., help="Employer message"),
    context_dir: Path | None = typer.Option(None, "--context-dir", "-c", help="Persona documents directory"),  # noqa: B008
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
) -> None:
    """Answer one message and exit."""
    renderer = Renderer()
    settings = _settings_or_exit(renderer, context_dir)
    configure_logging(level=settings.log_level)
    controller = _controller_or_exit(renderer, settings)
    try:
        result = asyncio.run(controller.handle_message(message))
    except (CareerDeskError, ValueError) as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc
    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return
    renderer.reply(result)


@app.command()
def chat(
    context_dir: Path | None = typer.Option(None, "--context-dir", "-c", help="Persona documents directory"),  # noqa: B008
    show_log: bool = typer.Option(False, "--show-log", help="Show the evaluation log of each reply"),
) -> None:
    """Interactive conversation in the terminal."""
    renderer = Renderer()
    settings = _settings_or_exit(renderer, context_dir)
    configure_logging(profile="chat", level=settings.log_level)
    controller = _controller_or_exit(renderer, settings)
    renderer.welcome(settings.model)
    asyncio.run(_chat_loop(controller, renderer, show_log=show_log))


async def _chat_loop(controller: ReplyController, renderer: Renderer, *, show_log: bool) -> None:
    while True:
        try:
            user_input = await renderer.get_user_input()
        except (EOFError, KeyboardInterrupt):
            break
        if not user_input.strip():
            continue
        if user_input.strip().lower() in EXIT_COMMANDS:
            break
        try:
            result = await controller.handle_message(user_input)
        except CareerDeskError as exc:
            renderer.error(str(exc))
            continue
        renderer.reply(result, show_log=show_log)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Serve the HTTP chat endpoint."""
    import uvicorn

    from careerdesk.api import create_app

    settings = _settings_or_exit(Renderer())
    configure_logging(level=settings.log_level)
    uvicorn.run(create_app(), host=host, port=port)
