"""Tests for shell completion helpers."""

from pathlib import Path

from plait.completions import complete_task_id, complete_workflow_name
from plait.core import ExecutionDriver, JsonTaskStore


class TestCompleteWorkflowName:
    """Tests for complete_workflow_name function."""

    def test_matches_prefix(
        self, project: Path, two_step_workflow: str, circular_workflows: str
    ):
        assert complete_workflow_name("circ") == ["circular-a", "circular-b"]

    def test_empty_prefix_lists_all(self, project: Path, two_step_workflow: str):
        assert complete_workflow_name("") == ["simple"]

    def test_invalid_config_yields_nothing(self, project: Path):
        (project / ".plait").mkdir()
        (project / ".plait" / "config.toml").write_text("[broken")
        assert complete_workflow_name("") == []


class TestCompleteTaskId:
    """Tests for complete_task_id function."""

    def test_no_tasks_file(self, project: Path):
        assert complete_task_id("T") == []

    def test_only_incomplete_tasks(
        self, project: Path, two_step_workflow: str, driver: ExecutionDriver
    ):
        file_driver = ExecutionDriver(
            store=JsonTaskStore(project / ".plait" / "tasks.json"),
            flattener=driver.flattener,
        )
        file_driver.generate(two_step_workflow)
        file_driver.complete("T001")

        assert complete_task_id("t") == ["T002"]
