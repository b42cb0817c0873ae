"""Shell completion helpers for plait CLI."""

from .core import JsonTaskStore, WorkflowParser
from .errors import ConfigError
from .runtime import get_config


def complete_workflow_name(incomplete: str) -> list[str]:
    """Return workflow names that start with the given prefix.

    Used for shell completion of workflow arguments. Configuration errors
    yield no suggestions rather than breaking the user's shell.

    Args:
        incomplete: The partial name typed by the user

    Returns:
        Matching workflow names, sorted
    """
    try:
        config = get_config()
    except ConfigError:
        return []
    names = WorkflowParser(config.workflows.dir).workflow_names()
    return [name for name in names if name.startswith(incomplete)]


def complete_task_id(incomplete: str) -> list[str]:
    """Return ids of incomplete tasks that start with the given prefix."""
    try:
        config = get_config()
    except ConfigError:
        return []
    document = JsonTaskStore(config.store.path).load()
    if document is None:
        return []
    prefix = incomplete.upper()
    return [t.id for t in document.tasks if not t.completed and t.id.startswith(prefix)]
