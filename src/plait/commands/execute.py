"""Task execution commands: next and complete."""

import typer
from rich.markup import escape

from ..completions import complete_task_id
from ..core import DriverState, NextTask
from ..errors import PlaitError, UnknownTaskIdError
from ..output import OutputContext, get_output_context
from .shared import EXIT_ERROR, next_task_data, require_driver


def show_next_task(ctx: OutputContext, outcome: NextTask) -> None:
    """Render the task to work on, or the completion message."""
    if ctx.json_mode:
        ctx.print_json(next_task_data(outcome))
        return

    if outcome.state is DriverState.NO_TASKS:
        ctx.console.print("No pending tasks: all tasks are completed or none were generated.")
        ctx.console.print("  Start with: plait generate <workflow>")
        return

    if outcome.state is DriverState.ALL_COMPLETED:
        workflow = escape(outcome.workflow_name or "")
        ctx.console.print(
            f"\n[bold green]All tasks completed for workflow: {workflow}[/bold green]"
        )
        ctx.console.print("Tasks file cleaned up.")
        return

    task = outcome.task
    assert task is not None
    if outcome.progress is not None:
        ctx.console.print(
            f"\n[bold]Progress:[/bold] {outcome.progress.completed}/{outcome.progress.total}"
            " tasks completed"
        )
    ctx.console.print(f"[bold]Task:[/bold] {task.id} - {escape(task.name)}", highlight=False)
    ctx.console.print(f"[bold]Source:[/bold] {escape(task.source_workflow)}", highlight=False)
    ctx.panel(task.description, title=f"{task.id} {task.name}")
    ctx.console.print("\n[bold]After completing this task, run:[/bold]")
    ctx.console.print(f"  plait complete {task.id}")


def next_task() -> None:
    """Show the next incomplete task."""
    ctx = get_output_context()
    driver = require_driver(ctx)
    show_next_task(ctx, driver.execute_next())


def complete(
    task_id: str = typer.Argument(
        ...,
        help="Task ID to mark completed (e.g. T001)",
        autocompletion=complete_task_id,
    ),
) -> None:
    """Mark a task completed and show the next one."""
    ctx = get_output_context()
    driver = require_driver(ctx)

    try:
        outcome = driver.complete(task_id.upper())
    except UnknownTaskIdError as e:
        ctx.error(str(e), {"task_id": e.task_id, "valid_ids": e.valid_ids})
        raise typer.Exit(EXIT_ERROR) from None
    except PlaitError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_ERROR) from None

    ctx.print(f"[green]Task {task_id.upper()} marked as completed.[/green]")
    show_next_task(ctx, outcome)
