"""Task models persisted in the task store.

The store file uses camelCase keys (``workflowName``, ``sourceStep``...);
models accept both camelCase and field names on input.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FlattenedTask(BaseModel):
    """Atomic unit of execution produced by flattening.

    Attributes:
        id: Positional identifier (T001, T002, ...), assigned after flattening.
        name: Task title; loop tasks carry their item after a colon.
        description: Full instructions for whoever performs the task.
        source_workflow: Workflow path that produced the task (``a > b``).
        source_step: Slug of the originating step.
        completed: Completion flag, only changed through the task store.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default="", pattern=r"^(T\d{3,})?$", description="Sequential task id")
    name: str = Field(description="Task title")
    description: str = Field(description="Resolved task instructions")
    source_workflow: str = Field(description="Provenance path of producing workflows")
    source_step: str = Field(description="Originating step slug")
    completed: bool = Field(default=False, description="Whether the task is done")


class TaskStoreDocument(BaseModel):
    """Persisted task list written to the tasks file.

    Attributes:
        workflow_name: Root workflow the tasks were generated from.
        generated_at: When the task list was generated.
        tasks: Flattened tasks in execution order.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    workflow_name: str = Field(description="Root workflow name")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Generation time"
    )
    tasks: list[FlattenedTask] = Field(default_factory=list)

    def find(self, task_id: str) -> FlattenedTask | None:
        """Return the task with the given id, if present."""
        return next((t for t in self.tasks if t.id == task_id), None)

    def first_incomplete(self) -> FlattenedTask | None:
        """Return the first task not yet completed, in store order."""
        return next((t for t in self.tasks if not t.completed), None)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]
