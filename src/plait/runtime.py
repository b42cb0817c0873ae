"""Runtime wiring for plait commands.

Builds the configured parser, flattener, task store and driver. The CLI
main callback records path overrides here; commands call get_driver().
"""

from dataclasses import dataclass
from pathlib import Path

from .config import PlaitConfig, get_plait_dir, load_config
from .core import ExecutionDriver, JsonTaskStore, WorkflowFlattener, WorkflowParser
from .services import make_command_runner


@dataclass
class Overrides:
    """Path overrides from global CLI options."""

    workflows_dir: Path | None = None
    tasks_file: Path | None = None


_overrides = Overrides()


def set_overrides(overrides: Overrides) -> None:
    """Set global path overrides. Called by CLI main callback."""
    global _overrides
    _overrides = overrides


def get_config(root: Path | None = None) -> PlaitConfig:
    """Load .plait/config.toml and apply CLI overrides.

    Raises:
        ConfigError: If the config file is invalid
    """
    root = root or Path.cwd()
    config = load_config(get_plait_dir(root))
    if _overrides.workflows_dir is not None:
        config.workflows.dir = _overrides.workflows_dir
    if _overrides.tasks_file is not None:
        config.store.path = _overrides.tasks_file
    return config.resolve_paths(root)


def build_driver(config: PlaitConfig, root: Path | None = None) -> ExecutionDriver:
    """Create an ExecutionDriver from resolved configuration."""
    parser = WorkflowParser(config.workflows.dir, strict_markers=config.parser.strict_markers)
    runner = make_command_runner(
        cwd=root or Path.cwd(),
        timeout=config.loop.timeout,
        shell=config.loop.shell,
    )
    return ExecutionDriver(
        store=JsonTaskStore(config.store.path),
        flattener=WorkflowFlattener(parser, run_command=runner),
        parser=parser,
    )


def get_driver(root: Path | None = None) -> ExecutionDriver:
    """Load configuration and build the driver for the current directory."""
    root = root or Path.cwd()
    return build_driver(get_config(root), root)
