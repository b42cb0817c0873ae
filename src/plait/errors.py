"""Errors raised by plait.

Errors about the shape of a workflow document are fatal for the whole
flatten. Problems discovered while expanding (cycles, failed loop commands)
are recovered where they happen and never reach the caller.
"""


class PlaitError(Exception):
    """Base exception for plait errors."""


class ConfigError(PlaitError):
    """Raised when .plait/config.toml cannot be read or validated."""


class WorkflowDocumentError(PlaitError):
    """Base exception for malformed or missing workflow documents."""


class DocumentNotFoundError(WorkflowDocumentError):
    """Raised when a workflow name has no backing markdown document."""

    def __init__(self, workflow_name: str, path: object) -> None:
        self.workflow_name = workflow_name
        self.path = path
        super().__init__(f"Workflow '{workflow_name}' not found: expected document at {path}")


class DocumentDecodeError(WorkflowDocumentError):
    """Raised when a workflow document is not valid UTF-8."""

    def __init__(self, workflow_name: str, path: object, reason: str) -> None:
        self.workflow_name = workflow_name
        self.path = path
        super().__init__(f"Workflow '{workflow_name}' at {path} is not valid UTF-8: {reason}")


class ConflictingMarkersError(WorkflowDocumentError):
    """Raised when a single step declares both a workflow and a loop marker."""

    def __init__(self, workflow_name: str, step_name: str, line_number: int) -> None:
        self.workflow_name = workflow_name
        self.step_name = step_name
        self.line_number = line_number
        super().__init__(
            f"Step '{step_name}' ({workflow_name}.md, line {line_number}) declares more "
            "than one runner marker; expected at most one of workflow:<name> or loop:<VAR>"
        )


class LoopCommandError(PlaitError):
    """Raised when a loop discovery command fails to run."""


class StoreError(PlaitError):
    """Base exception for task store problems."""


class StoreMissingError(StoreError):
    """Raised when an operation needs a task store but none exists."""

    def __init__(
        self, message: str = "No tasks file found. Run 'plait generate <workflow>' first."
    ) -> None:
        super().__init__(message)


class UnknownTaskIdError(StoreError):
    """Raised when a task id is not present in the store."""

    def __init__(self, task_id: str, valid_ids: list[str]) -> None:
        self.task_id = task_id
        self.valid_ids = valid_ids
        available = ", ".join(valid_ids) if valid_ids else "none"
        super().__init__(f"Task {task_id} not found. Available tasks: {available}")


class TaskAlreadyCompletedError(StoreError):
    """Raised when completing a task that is already marked completed."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already completed")


class EmptyWorkflowError(PlaitError):
    """Raised when a workflow flattens to zero tasks."""

    def __init__(self, workflow_name: str) -> None:
        self.workflow_name = workflow_name
        super().__init__(
            f"No executable tasks found in '{workflow_name}': it has no "
            "'### Step N: Title' headers, or every step was skipped as a circular reference"
        )
