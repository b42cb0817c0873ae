"""Reset command."""

from ..output import get_output_context
from .shared import require_driver


def reset() -> None:
    """Delete the task list regardless of progress."""
    ctx = get_output_context()
    driver = require_driver(ctx)

    removed = driver.reset()
    if ctx.json_mode:
        ctx.print_json({"reset": removed})
    elif removed:
        ctx.success("Tasks file reset")
    else:
        ctx.console.print("No tasks file to reset.")
