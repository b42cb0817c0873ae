"""Shared test fixtures for plait tests."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from plait.core import InMemoryTaskStore, WorkflowFlattener, WorkflowParser
from plait.core.driver import ExecutionDriver
from plait.runtime import Overrides, set_overrides

WriteWorkflow = Callable[[str, str], Path]


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clear_overrides() -> Generator[None, None, None]:
    """Reset CLI path overrides between tests."""
    set_overrides(Overrides())
    yield
    set_overrides(Overrides())


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a project directory with an empty workflows dir and chdir into it."""
    (tmp_path / ".windsurf" / "workflows").mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def workflows_dir(project: Path) -> Path:
    """Return the default workflows directory of the test project."""
    return project / ".windsurf" / "workflows"


@pytest.fixture
def write_workflow(workflows_dir: Path) -> WriteWorkflow:
    """Return a helper writing <name>.md into the workflows directory."""

    def _write(name: str, content: str) -> Path:
        path = workflows_dir / f"{name}.md"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def parser(workflows_dir: Path) -> WorkflowParser:
    """Create a parser over the test workflows directory."""
    return WorkflowParser(workflows_dir)


@pytest.fixture
def loop_items() -> list[str]:
    """Items returned by the mocked loop command."""
    return ["file1.ts", "file2.ts"]


@pytest.fixture
def flattener(parser: WorkflowParser, loop_items: list[str]) -> WorkflowFlattener:
    """Create a flattener whose loop commands return loop_items."""
    return WorkflowFlattener(parser, run_command=lambda _command: "\n".join(loop_items) + "\n")


@pytest.fixture
def store() -> InMemoryTaskStore:
    """Create an empty in-memory task store."""
    return InMemoryTaskStore()


@pytest.fixture
def driver(store: InMemoryTaskStore, flattener: WorkflowFlattener) -> ExecutionDriver:
    """Create a driver over the in-memory store."""
    return ExecutionDriver(store=store, flattener=flattener)


@pytest.fixture
def two_step_workflow(write_workflow: WriteWorkflow) -> str:
    """Write a workflow with two plain steps and return its name."""
    write_workflow(
        "simple",
        """---
description: Two plain steps
---

## Steps

### Step 1: Write the code

Implement the feature.

### Step 2: Write the tests

Cover the feature with tests.
""",
    )
    return "simple"


@pytest.fixture
def circular_workflows(write_workflow: WriteWorkflow) -> str:
    """Write workflows A and B that call each other and return A's name."""
    write_workflow(
        "circular-a",
        """### Step 1: Task A1

This is task A1.

### Step 2: Call Workflow B

<!-- runner:workflow:circular-b -->

### Step 3: Task A2

This is task A2.
""",
    )
    write_workflow(
        "circular-b",
        """### Step 1: Task B1

This is task B1.

### Step 2: Call Workflow A (Circular!)

<!-- runner:workflow:circular-a -->

### Step 3: Task B2

This is task B2.
""",
    )
    return "circular-a"
