"""Constants for plait CLI."""

# Subprocess timeouts (seconds)
LOOP_COMMAND_TIMEOUT = 120  # loop item discovery commands

# Default locations, relative to the project root
PLAIT_DIR = ".plait"
DEFAULT_WORKFLOWS_DIR = ".windsurf/workflows"
DEFAULT_TASKS_FILE = ".plait/tasks.json"
DEFAULT_LOOP_SHELL = "/bin/bash"

# Joins nested workflow names in a task's source path
SOURCE_PATH_SEPARATOR = " > "
