"""CLI command implementations for plait.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .execute import complete, next_task
from .generate import generate, start
from .init import init
from .reset import reset
from .status import list_workflows, status

__all__ = [
    "complete",
    "generate",
    "init",
    "list_workflows",
    "next_task",
    "reset",
    "start",
    "status",
]
