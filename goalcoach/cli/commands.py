"""CLI commands for GoalCoach."""

import asyncio

import typer
from loguru import logger
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from goalcoach import __logo__, __version__

app = typer.Typer(
    name="goalcoach",
    help=f"{__logo__} GoalCoach - conversational goal and task coach",
    no_args_is_help=True,
)

console = Console()
EXIT_COMMANDS = {"exit", "quit", "/exit", "/quit", ":q"}


def _print_coach_response(response: str, render_markdown: bool) -> None:
    """Render the coach reply with consistent terminal styling."""
    content = response or ""
    body = Markdown(content) if render_markdown else Text(content)
    console.print()
    console.print(f"[cyan]{__logo__} Coach[/cyan]")
    console.print(body)
    console.print()


def _print_turn_summary(result) -> None:
    if not result.tasks_created:
        return
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("reply type", result.type.value)
    table.add_row("tasks touched", ", ".join(result.related_tasks) or "-")
    console.print(table)


def _is_exit_command(command: str) -> bool:
    """Return True when input should end interactive chat."""
    return command.lower() in EXIT_COMMANDS


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} GoalCoach v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """GoalCoach - conversational goal and task coach."""
    pass


@app.command()
def version():
    """Show the installed version."""
    console.print(f"{__logo__} GoalCoach v{__version__}")


@app.command()
def chat(
    message: str = typer.Option(None, "--message", "-m", help="Message to send to the coach"),
    user_id: str = typer.Option("cli", "--user", "-u", help="User the goals belong to"),
    goal_id: str = typer.Option(None, "--goal", "-g", help="Goal to focus the conversation on"),
    markdown: bool = typer.Option(True, "--markdown/--no-markdown", help="Render coach output as Markdown"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show GoalCoach runtime logs during chat"),
):
    """Chat with the coach against the configured goal store."""
    from goalcoach.coach import CoachChat
    from goalcoach.notifications import build_notifier
    from goalcoach.providers import LiteLLMProvider, LLMProviderError, friendly_error
    from goalcoach.settings import get_settings
    from goalcoach.storage import build_store

    settings = get_settings()
    provider = LiteLLMProvider.from_settings(settings)

    if logs:
        logger.enable("goalcoach")
    else:
        logger.disable("goalcoach")

    if not provider.is_available():
        console.print("[yellow]Warning: GOALCOACH_LLM_API_KEY is not set; relying on provider env vars.[/yellow]")

    # Show spinner when logs are off (no output to miss); skip when logs are on
    def _thinking_ctx():
        if logs:
            from contextlib import nullcontext
            return nullcontext()
        return console.status("[dim]Coach is thinking...[/dim]", spinner="dots")

    async def run() -> None:
        store = await build_store(settings)
        coach = CoachChat(
            store,
            provider,
            notifier=build_notifier(settings),
            minutes_per_task=settings.minutes_per_extracted_task,
        )
        history: list[dict[str, str]] = []

        async def turn(text: str) -> None:
            try:
                with _thinking_ctx():
                    result = await coach.process_chat_turn(text, user_id, goal_id, history)
            except LLMProviderError as e:
                console.print(f"[red]{friendly_error(e)}[/red]")
                return
            _print_coach_response(result.message, render_markdown=markdown)
            _print_turn_summary(result)

        try:
            if message:
                await turn(message)
                return
            console.print(f"{__logo__} Interactive mode (type [bold]exit[/bold] or [bold]Ctrl+C[/bold] to quit)\n")
            while True:
                try:
                    user_input = await asyncio.to_thread(console.input, "[bold blue]You:[/bold blue] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\nGoodbye!")
                    break
                command = user_input.strip()
                if not command:
                    continue
                if _is_exit_command(command):
                    console.print("\nGoodbye!")
                    break
                await turn(command)
        finally:
            await store.close()

    asyncio.run(run())


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host (defaults to settings)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (defaults to settings)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start the GoalCoach HTTP API server (FastAPI + Uvicorn)."""
    import uvicorn

    from goalcoach.settings import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"{__logo__} Starting GoalCoach API on {host}:{port} ...")
    uvicorn.run(
        "goalcoach.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    app()
