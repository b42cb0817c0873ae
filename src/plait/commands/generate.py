"""Task list generation commands: generate and start."""

from collections import Counter

import typer

from ..completions import complete_workflow_name
from ..core import StartAction
from ..errors import PlaitError
from ..models import TaskStoreDocument
from ..output import OutputContext, get_output_context
from .shared import EXIT_ERROR, require_driver


def _show_generated(ctx: OutputContext, document: TaskStoreDocument) -> None:
    if ctx.json_mode:
        ctx.print_json(document.model_dump(mode="json", by_alias=True))
        return

    ctx.console.print(f"\n[green]Generated {len(document.tasks)} tasks[/green]")
    ctx.console.print("\n[bold]Tasks by source:[/bold]")
    for source, count in Counter(t.source_workflow for t in document.tasks).items():
        ctx.console.print(f"  {source}: {count}", highlight=False)
    ctx.console.print("\n[bold]Next step:[/bold] Start execution:")
    ctx.console.print("  plait next")


workflow_argument = typer.Argument(
    ...,
    help="Workflow name (document <name>.md in the workflows directory)",
    autocompletion=complete_workflow_name,
)


def generate(workflow: str = workflow_argument) -> None:
    """Flatten a workflow into a fresh task list, replacing any existing one."""
    ctx = get_output_context()
    driver = require_driver(ctx)

    try:
        document = driver.generate(workflow)
    except PlaitError as e:
        ctx.error(str(e), {"workflow": workflow})
        raise typer.Exit(EXIT_ERROR) from None

    _show_generated(ctx, document)


def start(workflow: str = workflow_argument) -> None:
    """Start a workflow, or show how to resume one already in progress."""
    ctx = get_output_context()
    driver = require_driver(ctx)

    try:
        result = driver.start(workflow)
    except PlaitError as e:
        ctx.error(str(e), {"workflow": workflow})
        raise typer.Exit(EXIT_ERROR) from None

    if result.action is StartAction.GENERATED:
        assert result.document is not None
        ctx.print(f"\nStarting new workflow: {workflow}")
        _show_generated(ctx, result.document)
        return

    progress = result.progress
    assert progress is not None
    if ctx.json_mode:
        ctx.print_json(
            {
                "action": result.action.value,
                "workflow": workflow,
                "active_workflow": result.active_workflow,
                "progress": {"total": progress.total, "completed": progress.completed},
            }
        )
        if result.action is StartAction.CONFLICT:
            raise typer.Exit(EXIT_ERROR)
        return

    if result.action is StartAction.RESUMABLE:
        ctx.console.print(f"\nFound existing tasks for workflow: {workflow}")
        ctx.console.print(f"  Progress: {progress.completed}/{progress.total} tasks completed")
        ctx.console.print("\n  To continue where you left off:")
        ctx.console.print("    plait next")
        ctx.console.print("  To start over with a fresh task list:")
        ctx.console.print(f"    plait generate {workflow}")
        return

    ctx.error(f"A different workflow is in progress: {result.active_workflow}")
    ctx.console.print(f"  To switch to {workflow}, first run: plait reset")
    raise typer.Exit(EXIT_ERROR)
