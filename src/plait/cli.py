"""Plait CLI: flatten markdown workflows and work through them task by task."""

from pathlib import Path

import typer

from plait import __version__

from .commands import (
    complete,
    generate,
    init,
    list_workflows,
    next_task,
    reset,
    start,
    status,
)
from .logging import configure_logging
from .output import OutputContext, set_output_context
from .runtime import Overrides, set_overrides


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"plait {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="plait",
    help="Flatten markdown workflows into a numbered task list and execute it one task at a time",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show warnings and errors",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    workflows_dir: Path | None = typer.Option(
        None,
        "--workflows-dir",
        "-w",
        help="Directory of workflow documents (overrides config.toml)",
    ),
    tasks_file: Path | None = typer.Option(
        None,
        "--tasks-file",
        "-t",
        help="Tasks JSON file (overrides config.toml)",
    ),
) -> None:
    """Plait CLI - workflow flattening and task execution."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))
    set_overrides(Overrides(workflows_dir=workflows_dir, tasks_file=tasks_file))


app.command()(init)
app.command()(generate)
app.command()(start)
app.command("next")(next_task)
app.command()(complete)
app.command()(status)
app.command()(reset)
app.command("list")(list_workflows)


if __name__ == "__main__":
    app()
