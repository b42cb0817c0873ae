"""External service integrations for plait.

This package provides interfaces to external tools:
- shell: Loop item discovery commands
"""

from .shell import CommandRunner, make_command_runner, run_shell_command, split_items

__all__ = [
    "CommandRunner",
    "make_command_runner",
    "run_shell_command",
    "split_items",
]
