"""Logging configuration for plait CLI.

Diagnostics (circular workflow references, failed loop commands, corrupt
task files) are emitted as warnings so they stay visible with ``-q``.
"""

import logging
import sys
from enum import IntEnum
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


class LogLevel(IntEnum):
    """Log levels selected by the global CLI flags."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def resolve_level(verbosity: int = 0, quiet: bool = False, debug: bool = False) -> LogLevel:
    """Map CLI flags to a log level.

    Precedence is quiet > debug > verbosity.
    """
    if quiet:
        return LogLevel.QUIET
    if debug or verbosity >= 1:
        return LogLevel.VERBOSE
    return LogLevel.NORMAL


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO = sys.stderr,
    debug: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=normal, 1+=debug)
        quiet: Only show warnings and errors
        no_color: Disable colored output
        stream: Output stream for log records
        debug: Enable debug logging with timestamps and source paths

    Returns:
        Rich console for command output
    """
    level = resolve_level(verbosity, quiet=quiet, debug=debug)
    detailed = debug or verbosity >= 2

    console = Console(force_terminal=False if no_color else None, no_color=no_color)
    log_console = Console(
        file=stream,
        force_terminal=False if no_color else None,
        no_color=no_color,
    )

    handler = RichHandler(
        console=log_console,
        show_time=detailed,
        show_path=detailed,
        markup=False,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
    )

    return console
