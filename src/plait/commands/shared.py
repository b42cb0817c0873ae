"""Helpers shared by command implementations."""

import typer

from ..core import ExecutionDriver, NextTask
from ..errors import ConfigError
from ..output import OutputContext
from ..runtime import get_driver

EXIT_ERROR = 1
EXIT_CONFIG = 2


def require_driver(ctx: OutputContext) -> ExecutionDriver:
    """Build the driver, exiting with code 2 on configuration errors."""
    try:
        return get_driver()
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_CONFIG) from None


def next_task_data(outcome: NextTask) -> dict:
    """JSON representation of an execute_next/complete outcome."""
    data: dict = {"state": outcome.state.value, "workflow": outcome.workflow_name}
    if outcome.task is not None:
        data["task"] = outcome.task.model_dump(mode="json", by_alias=True)
    if outcome.progress is not None:
        data["progress"] = {
            "total": outcome.progress.total,
            "completed": outcome.progress.completed,
            "remaining": outcome.progress.remaining,
        }
    return data
