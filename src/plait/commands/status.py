"""Read-only commands: status and list."""

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..output import get_output_context
from .shared import require_driver


def status() -> None:
    """Show task list progress."""
    ctx = get_output_context()
    driver = require_driver(ctx)

    report = driver.status()
    if report is None:
        if ctx.json_mode:
            ctx.print_json({"state": "no_tasks"})
        else:
            ctx.console.print("No tasks file found. Run: plait generate <workflow>")
        return

    progress = report.progress
    if ctx.json_mode:
        ctx.print_json(
            {
                "workflow": report.workflow_name,
                "generated_at": report.generated_at.isoformat(),
                "total": progress.total,
                "completed": progress.completed,
                "remaining": progress.remaining,
                "tasks": [t.model_dump(mode="json", by_alias=True) for t in report.tasks],
            }
        )
        return

    ctx.console.print(f"\n[bold]Workflow:[/bold] {report.workflow_name}")
    ctx.console.print(
        f"[bold]Generated:[/bold] {report.generated_at.strftime('%Y-%m-%d %H:%M')}"
    )
    ctx.console.print(
        f"[bold]Tasks:[/bold] {progress.completed}/{progress.total} completed,"
        f" {progress.remaining} remaining"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("", width=1)
    table.add_column("ID")
    table.add_column("Task")
    table.add_column("Source")
    for task in report.tasks:
        marker = "[green]✓[/green]" if task.completed else "·"
        table.add_row(marker, task.id, Text(task.name), Text(task.source_workflow))
    ctx.console.print(table)


def list_workflows() -> None:
    """List available workflows and their step counts."""
    ctx = get_output_context()
    driver = require_driver(ctx)
    assert driver.parser is not None

    summaries = driver.list_workflows()
    if ctx.json_mode:
        ctx.print_json(
            {
                "workflows_dir": str(driver.parser.workflows_dir),
                "workflows": [
                    {"name": s.name, "steps": s.step_count, "error": s.error} for s in summaries
                ],
            }
        )
        return

    if not summaries:
        ctx.console.print(f"No workflows found in {driver.parser.workflows_dir}")
        return

    ctx.console.print(f"\nAvailable workflows in {driver.parser.workflows_dir}:\n")
    for summary in summaries:
        if summary.error:
            ctx.console.print(f"  {summary.name} [red](parse error: {escape(summary.error)})[/red]")
        else:
            ctx.console.print(f"  {summary.name} ({summary.step_count} steps)", highlight=False)
