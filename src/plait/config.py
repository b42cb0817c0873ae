"""Configuration management for plait."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    DEFAULT_LOOP_SHELL,
    DEFAULT_TASKS_FILE,
    DEFAULT_WORKFLOWS_DIR,
    LOOP_COMMAND_TIMEOUT,
    PLAIT_DIR,
)
from .errors import ConfigError

CONFIG_FILE = "config.toml"


class WorkflowsConfig(BaseModel):
    """Where workflow documents live."""

    dir: Path = Field(
        default=Path(DEFAULT_WORKFLOWS_DIR), description="Directory of <name>.md documents"
    )


class StoreConfig(BaseModel):
    """Where the task list is persisted."""

    path: Path = Field(default=Path(DEFAULT_TASKS_FILE), description="Tasks JSON file")


class LoopConfig(BaseModel):
    """Configuration for loop item discovery commands."""

    shell: str = DEFAULT_LOOP_SHELL
    timeout: int = Field(default=LOOP_COMMAND_TIMEOUT, gt=0, description="Seconds per command")


class ParserConfig(BaseModel):
    """Configuration for workflow document parsing."""

    # Reject steps with both a workflow and a loop marker; otherwise last marker wins
    strict_markers: bool = True


class PlaitConfig(BaseModel):
    """Root configuration for plait."""

    workflows: WorkflowsConfig = Field(default_factory=WorkflowsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    loop: LoopConfig = Field(default_factory=LoopConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)

    def resolve_paths(self, root: Path) -> "PlaitConfig":
        """Return a copy with relative paths anchored at the project root."""
        workflows_dir = self.workflows.dir
        tasks_file = self.store.path
        return self.model_copy(
            update={
                "workflows": WorkflowsConfig(
                    dir=workflows_dir if workflows_dir.is_absolute() else root / workflows_dir
                ),
                "store": StoreConfig(
                    path=tasks_file if tasks_file.is_absolute() else root / tasks_file
                ),
            }
        )


def get_plait_dir(root: Path | None = None) -> Path:
    """Get .plait directory path.

    Args:
        root: Project root, defaults to the current directory

    Returns:
        Path to .plait directory
    """
    if root is None:
        root = Path.cwd()
    return root / PLAIT_DIR


def load_config(plait_dir: Path) -> PlaitConfig:
    """Load config from .plait/config.toml.

    Args:
        plait_dir: Path to .plait directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values
    """
    config_path = plait_dir / CONFIG_FILE
    if not config_path.exists():
        return PlaitConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    try:
        return PlaitConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def write_config_template(plait_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        plait_dir: Path to .plait directory

    Returns:
        Path to the written config file
    """
    plait_dir.mkdir(parents=True, exist_ok=True)
    config_path = plait_dir / CONFIG_FILE
    template = {
        "workflows": {"dir": DEFAULT_WORKFLOWS_DIR},
        "store": {"path": DEFAULT_TASKS_FILE},
        "loop": {"shell": DEFAULT_LOOP_SHELL, "timeout": LOOP_COMMAND_TIMEOUT},
        "parser": {"strict_markers": True},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
