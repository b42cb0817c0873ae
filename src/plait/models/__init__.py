"""Pydantic data models for plait.

This package defines the data structures used throughout plait for:
- Parsed workflow steps (WorkflowStep, StepKind)
- Flattened tasks and the persisted task list (FlattenedTask, TaskStoreDocument)

Example:
    >>> from plait.models import FlattenedTask
    >>> task = FlattenedTask(
    ...     id="T001", name="Setup", description="...",
    ...     source_workflow="release", source_step="setup",
    ... )
    >>> task.model_dump_json(by_alias=True)
"""

from .step import StepKind, WorkflowStep
from .task import FlattenedTask, TaskStoreDocument

__all__ = [
    "FlattenedTask",
    "StepKind",
    "TaskStoreDocument",
    "WorkflowStep",
]
