"""Main CLI application using Typer."""
import asyncio
import contextlib

import typer
from dotenv import load_dotenv
from rich.console import Console, Group
from rich.table import Table

from ..llm import DecodeFailure, OllamaError
from ..ui.formatting import render_markdown
from .providers import get_client

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ollama-tui",
    help="Terminal chat client for models served by a local Ollama server",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

HOST_OPTION = typer.Option(
    None,
    "--host",
    "-H",
    help="Ollama server URL (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
)


@app.command()
def chat(
    host: str | None = HOST_OPTION,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the trace log at level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive TUI chat interface."""
    from ..ui import run_textual_tui

    client = get_client(host)
    try:
        return_code = asyncio.run(run_textual_tui(client, log_level=log_level))
    except KeyboardInterrupt:
        return_code = 0
    if return_code:
        raise typer.Exit(code=return_code)


@app.command()
def models(host: str | None = HOST_OPTION):
    """List the models installed on the server."""
    async def _models():
        async with get_client(host) as client:
            return await client.list_models()

    try:
        names = asyncio.run(_models())
    except OllamaError as e:
        console.print(f"[red]Error fetching models: {e}[/red]")
        raise typer.Exit(code=1)

    if not names:
        console.print("[yellow]No models found on Ollama server.[/yellow]")
        return

    table = Table(title="Installed Models")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    for index, name in enumerate(names, start=1):
        table.add_row(str(index), name)
    console.print(table)


@app.command()
def ask(
    model: str = typer.Argument(..., help="Model to ask"),
    prompt: str = typer.Argument(..., help="Prompt text"),
    host: str | None = HOST_OPTION,
    raw: bool = typer.Option(
        False,
        "--raw",
        "-r",
        help="Print the reply as it streams, without the markdown pass"
    ),
):
    """Stream one reply to the console."""
    async def _ask() -> tuple[str, int]:
        reply: list[str] = []
        failures = 0
        async with get_client(host) as client:
            status = console.status(f"[dim]Asking {model}...[/dim]", spinner="dots")
            with contextlib.nullcontext() if raw else status:
                async for token in client.generate(model, prompt):
                    if isinstance(token, DecodeFailure):
                        failures += 1
                        console.print(f"[red]{token.message}[/red]")
                        continue
                    reply.append(token.response)
                    if raw:
                        console.out(token.response, end="", highlight=False)
        return "".join(reply), failures

    try:
        reply, failures = asyncio.run(_ask())
    except OllamaError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if raw:
        console.print()
    else:
        console.print(Group(*(line.to_text("cyan") for line in render_markdown(reply))))
    if failures:
        console.print(f"[dim]{failures} line(s) could not be decoded[/dim]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
