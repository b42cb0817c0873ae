"""Workflow flattening for plait.

Expands a workflow into a linear list of tasks, depth first and in
document order:

- plain steps become one task each;
- nested-workflow steps are replaced by the flattened target workflow;
- loop steps run their discovery command and become one task per item.

Only missing or malformed documents abort a flatten. A circular reference
contributes no tasks and a failing loop command contributes one fallback
task, so one broken branch never blocks an otherwise valid plan.
"""

import logging
import re

from ..constants import SOURCE_PATH_SEPARATOR
from ..errors import LoopCommandError
from ..models import FlattenedTask, StepKind, WorkflowStep
from ..services.shell import CommandRunner, run_shell_command, split_items
from .step_parser import WorkflowParser

logger = logging.getLogger(__name__)

DEFAULT_LOOP_VARIABLE = "FILE"


def format_task_id(index: int) -> str:
    """Format a 1-based position as a task id (T001, T002, ...)."""
    return f"T{index:03d}"


def assign_task_ids(tasks: list[FlattenedTask]) -> list[FlattenedTask]:
    """Number tasks sequentially in list order."""
    return [
        task.model_copy(update={"id": format_task_id(n)}) for n, task in enumerate(tasks, start=1)
    ]


def substitute_loop_variable(body: str, variable: str, item: str) -> str:
    """Replace every $VAR and ${VAR} token in body with the item text."""
    pattern = re.compile(rf"\$\{{{re.escape(variable)}\}}|\${re.escape(variable)}(?![A-Za-z0-9_])")
    # A function replacement keeps backslashes in the item literal
    return pattern.sub(lambda _: item, body)


class WorkflowFlattener:
    """Recursively expands workflows into FlattenedTask lists.

    Args:
        parser: Source of parsed workflow steps
        run_command: Loop discovery collaborator; returns command stdout
    """

    def __init__(self, parser: WorkflowParser, run_command: CommandRunner | None = None) -> None:
        self.parser = parser
        self.run_command = run_command or run_shell_command

    def flatten(self, workflow_name: str) -> list[FlattenedTask]:
        """Flatten a workflow from the root and assign task ids.

        Raises:
            DocumentNotFoundError: If the root or any nested workflow is missing
            ConflictingMarkersError: If any expanded step has conflicting markers
        """
        tasks = assign_task_ids(self.expand(workflow_name))
        logger.debug("Flattened %s into %d tasks", workflow_name, len(tasks))
        return tasks

    def expand(
        self,
        workflow_name: str,
        path_prefix: str = "",
        visited: frozenset[str] = frozenset(),
    ) -> list[FlattenedTask]:
        """Expand one workflow without assigning ids.

        Args:
            workflow_name: Workflow to expand
            path_prefix: Source path of the enclosing workflows
            visited: Workflows already open on this branch
        """
        source = (
            f"{path_prefix}{SOURCE_PATH_SEPARATOR}{workflow_name}" if path_prefix else workflow_name
        )
        if workflow_name in visited:
            logger.warning(
                "Circular workflow reference: %s (skipping '%s' to prevent infinite expansion)",
                source,
                workflow_name,
            )
            return []

        branch_visited = visited | {workflow_name}

        tasks: list[FlattenedTask] = []
        for step in self.parser.parse(workflow_name):
            if step.kind is StepKind.NESTED_WORKFLOW and step.target_workflow:
                tasks.extend(self.expand(step.target_workflow, source, branch_visited))
            elif step.kind is StepKind.LOOP:
                tasks.extend(self._expand_loop(step, source))
            else:
                tasks.append(
                    FlattenedTask(
                        name=step.name,
                        description=step.body or step.name,
                        source_workflow=source,
                        source_step=step.id,
                    )
                )
        return tasks

    def _expand_loop(self, step: WorkflowStep, source: str) -> list[FlattenedTask]:
        """Run a loop step's command and create one task per item."""
        if step.loop_command is None:
            return [self._loop_fallback(step, source, "no fenced command block follows the marker")]
        if not step.loop_command:
            return [self._loop_fallback(step, source, "empty command block")]

        try:
            items = split_items(self.run_command(step.loop_command))
        except LoopCommandError as e:
            logger.warning("Loop command for '%s' failed: %s", step.name, e)
            return [self._loop_fallback(step, source, str(e))]

        if not items:
            logger.warning("Loop '%s' returned no items", step.name)
            return [self._loop_fallback(step, source, "command returned no items")]

        logger.info("Loop '%s' expanded to %d items", step.name, len(items))
        variable = step.loop_variable or DEFAULT_LOOP_VARIABLE
        return [
            FlattenedTask(
                name=f"{step.name}: {item}",
                description=substitute_loop_variable(step.body, variable, item)
                or f"Process: {item}",
                source_workflow=source,
                source_step=step.id,
            )
            for item in items
        ]

    def _loop_fallback(self, step: WorkflowStep, source: str, reason: str) -> FlattenedTask:
        """Build the single task standing in for a loop that could not expand."""
        command = step.loop_command or "(missing)"
        description = (
            f"**Loop task (could not expand)**: {step.name}\n\n"
            f"Loop command: `{command}`\n"
            f"Error: {reason}\n\n"
            f"{step.body}"
        ).rstrip()
        return FlattenedTask(
            name=step.name,
            description=description,
            source_workflow=source,
            source_step=step.id,
        )
