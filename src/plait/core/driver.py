"""Execution driver for plait.

State machine over the task store::

    NO_TASKS --generate--> IN_PROGRESS --complete last--> ALL_COMPLETED --> NO_TASKS

ALL_COMPLETED is transient: it is reported when the last incomplete task is
found done, and the store is deleted in the same call.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from ..errors import (
    EmptyWorkflowError,
    StoreMissingError,
    TaskAlreadyCompletedError,
    UnknownTaskIdError,
    WorkflowDocumentError,
)
from ..models import FlattenedTask, TaskStoreDocument
from .flattener import WorkflowFlattener
from .step_parser import WorkflowParser
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class DriverState(str, Enum):
    """Execution state derived from the task store."""

    NO_TASKS = "no_tasks"
    IN_PROGRESS = "in_progress"
    ALL_COMPLETED = "all_completed"


class StartAction(str, Enum):
    """What `start` did for the requested workflow."""

    GENERATED = "generated"
    RESUMABLE = "resumable"
    CONFLICT = "conflict"


@dataclass
class Progress:
    """Completion counts for a task list."""

    total: int
    completed: int

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    @classmethod
    def of(cls, document: TaskStoreDocument) -> "Progress":
        return cls(total=len(document.tasks), completed=document.completed_count)


@dataclass
class NextTask:
    """Outcome of execute_next and complete.

    Attributes:
        state: Driver state after the call
        workflow_name: Workflow of the task list, if one was known
        task: Task to work on next (IN_PROGRESS only)
        progress: Counts at the time of the call (None when there is no store)
    """

    state: DriverState
    workflow_name: str | None = None
    task: FlattenedTask | None = None
    progress: Progress | None = None


@dataclass
class StatusReport:
    """Read-only snapshot of the task list."""

    workflow_name: str
    generated_at: datetime
    tasks: list[FlattenedTask]
    progress: Progress


@dataclass
class WorkflowSummary:
    """One entry of list_workflows."""

    name: str
    step_count: int | None = None
    error: str | None = None


@dataclass
class StartResult:
    """Outcome of start."""

    action: StartAction
    workflow_name: str
    document: TaskStoreDocument | None = None
    active_workflow: str | None = None
    progress: Progress | None = None


@dataclass
class ExecutionDriver:
    """Public operations of plait on top of a flattener and a task store.

    Args:
        store: Task persistence; injected so tests can use InMemoryTaskStore
        flattener: Expands workflows into tasks
        parser: Workflow document source, defaults to the flattener's parser
    """

    store: TaskStore
    flattener: WorkflowFlattener
    parser: WorkflowParser | None = None
    # Workflow whose store this driver deleted on completion
    _finished_workflow: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.parser is None:
            self.parser = self.flattener.parser

    def generate(self, workflow_name: str) -> TaskStoreDocument:
        """Flatten a workflow and replace the task store with its tasks.

        Raises:
            DocumentNotFoundError: If the workflow or a nested workflow is missing
            ConflictingMarkersError: If a step declares conflicting markers
            EmptyWorkflowError: If the workflow has no steps; the store is left untouched
        """
        logger.info("Generating tasks for workflow: %s", workflow_name)
        tasks = self.flattener.flatten(workflow_name)
        if not tasks:
            raise EmptyWorkflowError(workflow_name)

        document = TaskStoreDocument(
            workflow_name=workflow_name,
            generated_at=datetime.now(UTC),
            tasks=tasks,
        )
        self.store.save(document)
        self._finished_workflow = None
        return document

    def execute_next(self) -> NextTask:
        """Return the first incomplete task without marking it.

        With no store, reports NO_TASKS (or ALL_COMPLETED if this driver just
        finished a workflow). When every task is completed the store is
        deleted and ALL_COMPLETED is reported.
        """
        document = self.store.load()
        if document is None:
            if self._finished_workflow is not None:
                return NextTask(DriverState.ALL_COMPLETED, workflow_name=self._finished_workflow)
            return NextTask(DriverState.NO_TASKS)

        task = document.first_incomplete()
        if task is None:
            return self._finish(document)

        return NextTask(
            DriverState.IN_PROGRESS,
            workflow_name=document.workflow_name,
            task=task,
            progress=Progress.of(document),
        )

    def complete(self, task_id: str) -> NextTask:
        """Mark a task completed and report what comes next.

        The next task is the first incomplete one after task_id in store
        order, wrapping to earlier tasks left incomplete.

        Raises:
            StoreMissingError: If there is no task store
            UnknownTaskIdError: If task_id is not in the store
            TaskAlreadyCompletedError: If the task is already completed
        """
        document = self.store.load()
        if document is None:
            raise StoreMissingError()

        task = document.find(task_id)
        if task is None:
            raise UnknownTaskIdError(task_id, document.task_ids)
        if task.completed:
            raise TaskAlreadyCompletedError(task_id)

        document = self.store.set_completed(task_id, True)
        logger.debug("Marked %s completed", task_id)

        index = document.task_ids.index(task_id)
        ordered = document.tasks[index + 1 :] + document.tasks[:index]
        next_task = next((t for t in ordered if not t.completed), None)
        if next_task is None:
            return self._finish(document)

        return NextTask(
            DriverState.IN_PROGRESS,
            workflow_name=document.workflow_name,
            task=next_task,
            progress=Progress.of(document),
        )

    def status(self) -> StatusReport | None:
        """Return counts and per-task completion, or None without a store."""
        document = self.store.load()
        if document is None:
            return None
        return StatusReport(
            workflow_name=document.workflow_name,
            generated_at=document.generated_at,
            tasks=document.tasks,
            progress=Progress.of(document),
        )

    def reset(self) -> bool:
        """Delete the task store regardless of progress.

        Returns:
            True if a store was removed
        """
        self._finished_workflow = None
        return self.store.delete()

    def list_workflows(self) -> list[WorkflowSummary]:
        """Summarize every workflow document with its step count."""
        assert self.parser is not None
        summaries: list[WorkflowSummary] = []
        for name in self.parser.workflow_names():
            try:
                summaries.append(WorkflowSummary(name, step_count=len(self.parser.parse(name))))
            except WorkflowDocumentError as e:
                summaries.append(WorkflowSummary(name, error=str(e)))
        return summaries

    def start(self, workflow_name: str) -> StartResult:
        """Start a workflow, or report how to resume one already in progress.

        A store for the same workflow is left alone so the caller can choose
        between continuing and regenerating; a store for another workflow is
        a conflict that needs reset first.
        """
        document = self.store.load()
        if document is None:
            return StartResult(
                StartAction.GENERATED, workflow_name, document=self.generate(workflow_name)
            )

        action = (
            StartAction.RESUMABLE
            if document.workflow_name == workflow_name
            else StartAction.CONFLICT
        )
        return StartResult(
            action,
            workflow_name,
            active_workflow=document.workflow_name,
            progress=Progress.of(document),
        )

    def _finish(self, document: TaskStoreDocument) -> NextTask:
        self.store.delete()
        self._finished_workflow = document.workflow_name
        logger.debug("All tasks completed for %s; tasks file removed", document.workflow_name)
        return NextTask(
            DriverState.ALL_COMPLETED,
            workflow_name=document.workflow_name,
            progress=Progress.of(document),
        )
