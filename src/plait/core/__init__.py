"""Core business logic for plait.

- step_parser: Workflow document parsing
- flattener: Recursive expansion of nested workflows and loops
- task_store: Persisted task list (JSON file or in memory)
- driver: Execution state machine over the task store
"""

from .driver import (
    DriverState,
    ExecutionDriver,
    NextTask,
    Progress,
    StartAction,
    StartResult,
    StatusReport,
    WorkflowSummary,
)
from .flattener import (
    WorkflowFlattener,
    assign_task_ids,
    format_task_id,
    substitute_loop_variable,
)
from .step_parser import WorkflowParser, fence_delta, parse_steps, slugify
from .task_store import InMemoryTaskStore, JsonTaskStore, TaskStore

__all__ = [
    "DriverState",
    "ExecutionDriver",
    "InMemoryTaskStore",
    "JsonTaskStore",
    "NextTask",
    "Progress",
    "StartAction",
    "StartResult",
    "StatusReport",
    "TaskStore",
    "WorkflowFlattener",
    "WorkflowParser",
    "WorkflowSummary",
    "assign_task_ids",
    "fence_delta",
    "format_task_id",
    "parse_steps",
    "slugify",
    "substitute_loop_variable",
]
