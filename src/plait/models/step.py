"""Step model for parsed workflow steps.

Represents a single structural unit extracted from a workflow document.
Steps are derived on every parse and never persisted.
"""

from enum import Enum

from pydantic import BaseModel, Field


class StepKind(str, Enum):
    """How a step contributes to the flattened task list."""

    TASK = "task"
    NESTED_WORKFLOW = "nested-workflow"
    LOOP = "loop"


class WorkflowStep(BaseModel):
    """Parsed step from a workflow document.

    Attributes:
        id: Slug derived from the step title.
        name: Human-readable step title from the header.
        kind: Whether the step is a plain task, a nested workflow or a loop.
        body: Markdown content of the step, without marker lines.
        target_workflow: Referenced workflow name (nested-workflow steps).
        loop_command: Shell command enumerating loop items (loop steps).
        loop_variable: Placeholder substituted per loop item (loop steps).
        source_workflow: Name of the document the step was parsed from.
        line_number: 1-based line of the step header.

    Example:
        >>> step = WorkflowStep(
        ...     id="review-files",
        ...     name="Review files",
        ...     kind=StepKind.LOOP,
        ...     body="Review $FILE",
        ...     loop_command="git ls-files",
        ...     loop_variable="FILE",
        ...     source_workflow="review",
        ...     line_number=3,
        ... )
    """

    id: str = Field(description="Slug derived from the step title")
    name: str = Field(description="Human-readable step title")
    kind: StepKind = Field(default=StepKind.TASK, description="Step classification")
    body: str = Field(default="", description="Step content without marker lines")
    target_workflow: str | None = Field(default=None, description="Nested workflow name")
    loop_command: str | None = Field(default=None, description="Loop discovery command")
    loop_variable: str | None = Field(default=None, description="Loop placeholder name")
    source_workflow: str = Field(description="Workflow this step was parsed from")
    line_number: int = Field(description="1-based line of the step header")
