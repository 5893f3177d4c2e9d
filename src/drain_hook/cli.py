"""
CLI: ``drain-hook`` — run the invocation shim outside of Lambda.

Useful for replaying a lifecycle-hook event against a locally unpacked
deployment package::

    LAMBDA_TASK_ROOT=./build drain-hook invoke event.json
    cat event.json | drain-hook invoke
    drain-hook path
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path

import typer
from rich.console import Console

from drain_hook.environment import augment_search_path
from drain_hook.errors import DrainHookError
from drain_hook.logging import configure_logging
from drain_hook.settings import get_settings
from drain_hook.shim import InvocationShim

app = typer.Typer(
    name="drain-hook",
    help="drain-hook — run the drain-container-instance executable for an event.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        from drain_hook import __version__

        typer.echo(f"drain-hook {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """drain-hook CLI — invoke the shim and inspect its environment."""


def _read_event(event_file: str) -> object:
    if event_file == "-":
        raw = sys.stdin.read()
    else:
        path = Path(event_file)
        if not path.exists():
            err_console.print(f"[red]Event file not found: {event_file}[/red]")
            raise typer.Exit(code=2)
        raw = path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid event JSON: {exc}[/red]")
        raise typer.Exit(code=2) from exc


@app.command("invoke")
def invoke(
    event_file: str = typer.Argument("-", help="Path to an event JSON file ('-' for stdin)"),
    task_root: Path | None = typer.Option(  # noqa: UP007
        None, "--task-root", "-t", help="Override LAMBDA_TASK_ROOT",
    ),
) -> None:
    """Run the drain executable once for an event and report the outcome."""
    settings = get_settings()
    if task_root is not None:
        settings = settings.model_copy(update={"task_root": task_root})
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    event = _read_event(event_file)
    result = asyncio.run(InvocationShim(settings).run(event))

    if result.is_err():
        error = result.error
        detail = error.to_dict() if isinstance(error, DrainHookError) else {"message": str(error)}
        err_console.print(f"[red]✗ {error}[/red]")
        err_console.print_json(json.dumps(detail))
        raise typer.Exit(code=1)

    err_console.print("[green]✓ Process exited successfully[/green]")


@app.command("path")
def path(
    task_root: Path | None = typer.Option(  # noqa: UP007
        None, "--task-root", "-t", help="Override LAMBDA_TASK_ROOT",
    ),
) -> None:
    """Print the search path the drain executable would receive."""
    settings = get_settings()
    if task_root is not None:
        settings = settings.model_copy(update={"task_root": task_root})
    typer.echo(augment_search_path(os.environ.get("PATH"), settings.bin_dir))
