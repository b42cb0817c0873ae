"""Init command implementation."""

import typer

from ..config import CONFIG_FILE, get_plait_dir, write_config_template
from ..errors import ConfigError
from ..output import get_output_context
from ..runtime import get_config
from .shared import EXIT_CONFIG


def init() -> None:
    """Initialize plait in the current directory."""
    ctx = get_output_context()
    plait_dir = get_plait_dir()
    config_path = plait_dir / CONFIG_FILE

    if config_path.exists():
        ctx.console.print(f"[yellow]Config already exists:[/yellow] {config_path}")
    else:
        write_config_template(plait_dir)
        ctx.console.print(f"[green]Created config template:[/green] {config_path}")

    try:
        config = get_config()
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_CONFIG) from None

    workflows_dir = config.workflows.dir
    if workflows_dir.is_dir():
        count = len(list(workflows_dir.glob("*.md")))
        ctx.console.print(f"[green]✓[/green] workflows: {workflows_dir} ({count} documents)")
    else:
        ctx.console.print(f"[yellow]?[/yellow] workflows directory not found: {workflows_dir}")
        ctx.console.print("  Set [bold]\\[workflows] dir[/bold] in config.toml")

    ctx.console.print("\n[bold green]Plait initialized successfully![/bold green]")
