"""Shell command runner for loop item discovery."""

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from ..constants import DEFAULT_LOOP_SHELL, LOOP_COMMAND_TIMEOUT
from ..errors import LoopCommandError

logger = logging.getLogger(__name__)

# Given a shell command, return its captured stdout or raise LoopCommandError
CommandRunner = Callable[[str], str]


def run_shell_command(
    command: str,
    cwd: Path | None = None,
    timeout: int | None = None,
    shell: str = DEFAULT_LOOP_SHELL,
) -> str:
    """Run a shell command and return its stdout.

    Args:
        command: Command text, executed by ``shell`` (pipes and globs allowed)
        cwd: Working directory, defaults to the current directory
        timeout: Timeout in seconds (default: LOOP_COMMAND_TIMEOUT)
        shell: Shell executable used to interpret the command

    Returns:
        Captured standard output; undecodable bytes become U+FFFD

    Raises:
        LoopCommandError: If the command times out, cannot start, or exits non-zero
    """
    timeout = timeout or LOOP_COMMAND_TIMEOUT
    logger.debug("Running loop command: %s", command)

    try:
        result = subprocess.run(
            command,
            shell=True,
            executable=shell,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise LoopCommandError(f"Command timed out after {timeout} seconds") from e
    except OSError as e:
        raise LoopCommandError(f"Command could not be started: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        detail = f": {stderr}" if stderr else ""
        raise LoopCommandError(f"Command exited with status {result.returncode}{detail}")

    return result.stdout


def make_command_runner(
    cwd: Path | None = None,
    timeout: int | None = None,
    shell: str = DEFAULT_LOOP_SHELL,
) -> CommandRunner:
    """Bind working directory, timeout and shell into a CommandRunner."""

    def runner(command: str) -> str:
        return run_shell_command(command, cwd=cwd, timeout=timeout, shell=shell)

    return runner


def split_items(output: str) -> list[str]:
    """Split command output into loop items, one per non-blank line."""
    return [line.strip() for line in output.splitlines() if line.strip()]
