"""Tests for the execution driver."""

from collections.abc import Callable
from pathlib import Path

import pytest

from plait.core import DriverState, ExecutionDriver, InMemoryTaskStore, StartAction
from plait.errors import (
    DocumentNotFoundError,
    EmptyWorkflowError,
    StoreMissingError,
    TaskAlreadyCompletedError,
    UnknownTaskIdError,
)

WriteWorkflow = Callable[[str, str], Path]


class TestGenerate:
    """Tests for ExecutionDriver.generate."""

    def test_generate_saves_document(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        document = driver.generate(two_step_workflow)

        assert document.workflow_name == "simple"
        assert document.task_ids == ["T001", "T002"]
        assert store.load() == document

    def test_generate_replaces_previous_document(
        self,
        driver: ExecutionDriver,
        store: InMemoryTaskStore,
        two_step_workflow: str,
        circular_workflows: str,
    ) -> None:
        driver.generate(two_step_workflow)
        driver.complete("T001")
        driver.generate(circular_workflows)

        loaded = store.load()
        assert loaded is not None
        assert loaded.workflow_name == "circular-a"
        assert loaded.completed_count == 0

    def test_generate_missing_workflow(
        self, driver: ExecutionDriver, store: InMemoryTaskStore
    ) -> None:
        with pytest.raises(DocumentNotFoundError):
            driver.generate("nope")
        assert store.load() is None

    def test_generate_empty_workflow_keeps_store(
        self,
        driver: ExecutionDriver,
        store: InMemoryTaskStore,
        two_step_workflow: str,
        write_workflow: WriteWorkflow,
    ) -> None:
        write_workflow("empty", "# Nothing to do\n")
        driver.generate(two_step_workflow)

        with pytest.raises(EmptyWorkflowError, match="empty"):
            driver.generate("empty")

        loaded = store.load()
        assert loaded is not None
        assert loaded.workflow_name == "simple"

    def test_generate_only_circular_steps(
        self, driver: ExecutionDriver, write_workflow: WriteWorkflow
    ) -> None:
        write_workflow("loop-only", "### Step 1: Again\n<!-- workflow:loop-only -->\n")
        with pytest.raises(EmptyWorkflowError, match="circular reference"):
            driver.generate("loop-only")


class TestExecuteNext:
    """Tests for ExecutionDriver.execute_next."""

    def test_no_store(self, driver: ExecutionDriver) -> None:
        assert driver.execute_next().state is DriverState.NO_TASKS

    def test_returns_first_incomplete_without_marking(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        driver.generate(two_step_workflow)

        first = driver.execute_next()
        second = driver.execute_next()

        assert first.state is DriverState.IN_PROGRESS
        assert first.task is not None
        assert first.task.id == "T001"
        assert first.task.description == "Implement the feature."
        assert second.task == first.task
        assert first.progress is not None
        assert (first.progress.total, first.progress.completed) == (2, 0)

    def test_all_completed_deletes_store(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        driver.generate(two_step_workflow)
        store.set_completed("T001")
        store.set_completed("T002")

        outcome = driver.execute_next()

        assert outcome.state is DriverState.ALL_COMPLETED
        assert outcome.workflow_name == "simple"
        assert store.load() is None


class TestComplete:
    """Tests for ExecutionDriver.complete."""

    def test_end_to_end_two_steps(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        document = driver.generate(two_step_workflow)
        assert document.task_ids == ["T001", "T002"]
        assert not any(t.completed for t in document.tasks)

        outcome = driver.complete("T001")

        loaded = store.load()
        assert loaded is not None
        assert [t.completed for t in loaded.tasks] == [True, False]
        assert outcome.state is DriverState.IN_PROGRESS
        assert outcome.task is not None
        assert outcome.task.id == "T002"

        outcome = driver.complete("T002")

        assert outcome.state is DriverState.ALL_COMPLETED
        assert store.load() is None

    def test_lifecycle_then_execute_next_reports_completion(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, circular_workflows: str
    ) -> None:
        document = driver.generate(circular_workflows)
        for n, task_id in enumerate(document.task_ids, start=1):
            loaded = store.load()
            assert loaded is not None
            assert len(loaded.tasks) - loaded.completed_count == len(document.tasks) - n + 1
            driver.complete(task_id)

        assert store.load() is None
        outcome = driver.execute_next()
        assert outcome.state is DriverState.ALL_COMPLETED
        assert outcome.workflow_name == "circular-a"

    def test_out_of_order_completion_wraps(
        self, driver: ExecutionDriver, circular_workflows: str
    ) -> None:
        driver.generate(circular_workflows)
        driver.complete("T004")
        outcome = driver.complete("T003")
        assert outcome.task is not None
        assert outcome.task.id == "T001"

    def test_without_store(self, driver: ExecutionDriver) -> None:
        with pytest.raises(StoreMissingError):
            driver.complete("T001")

    def test_unknown_id_lists_valid_ids(
        self, driver: ExecutionDriver, two_step_workflow: str
    ) -> None:
        driver.generate(two_step_workflow)
        with pytest.raises(UnknownTaskIdError) as exc_info:
            driver.complete("T100")
        assert exc_info.value.valid_ids == ["T001", "T002"]

    def test_already_completed(self, driver: ExecutionDriver, two_step_workflow: str) -> None:
        driver.generate(two_step_workflow)
        driver.complete("T001")
        with pytest.raises(TaskAlreadyCompletedError):
            driver.complete("T001")


class TestStatusAndReset:
    """Tests for status, reset and list_workflows."""

    def test_status_without_store(self, driver: ExecutionDriver) -> None:
        assert driver.status() is None

    def test_status_counts(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, circular_workflows: str
    ) -> None:
        driver.generate(circular_workflows)
        driver.complete("T001")
        before = store.load()

        report = driver.status()

        assert report is not None
        assert report.workflow_name == "circular-a"
        assert (report.progress.total, report.progress.completed) == (4, 1)
        assert report.progress.remaining == 3
        assert [t.completed for t in report.tasks] == [True, False, False, False]
        assert store.load() == before

    def test_reset(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        driver.generate(two_step_workflow)
        assert driver.reset() is True
        assert store.load() is None
        assert driver.reset() is False
        assert driver.execute_next().state is DriverState.NO_TASKS

    def test_list_workflows(
        self, driver: ExecutionDriver, two_step_workflow: str, write_workflow: WriteWorkflow
    ) -> None:
        write_workflow(
            "broken",
            "### Step 1: Both\n<!-- workflow:x -->\n<!-- loop:F -->\n```\nls\n```\n",
        )
        summaries = {s.name: s for s in driver.list_workflows()}
        assert summaries["simple"].step_count == 2
        assert summaries["broken"].step_count is None
        assert "more than one runner marker" in (summaries["broken"].error or "")

    def test_list_workflows_reports_undecodable_document(
        self, driver: ExecutionDriver, two_step_workflow: str, workflows_dir: Path
    ) -> None:
        (workflows_dir / "bad.md").write_bytes(b"### Step 1: X\n\xff\n")
        summaries = {s.name: s for s in driver.list_workflows()}
        assert summaries["simple"].step_count == 2
        assert summaries["bad"].step_count is None
        assert "not valid UTF-8" in (summaries["bad"].error or "")


class TestStart:
    """Tests for ExecutionDriver.start."""

    def test_start_generates_when_idle(
        self, driver: ExecutionDriver, two_step_workflow: str
    ) -> None:
        result = driver.start(two_step_workflow)
        assert result.action is StartAction.GENERATED
        assert result.document is not None

    def test_start_same_workflow_is_resumable(
        self, driver: ExecutionDriver, store: InMemoryTaskStore, two_step_workflow: str
    ) -> None:
        driver.generate(two_step_workflow)
        driver.complete("T001")

        result = driver.start(two_step_workflow)

        assert result.action is StartAction.RESUMABLE
        assert result.progress is not None
        assert result.progress.completed == 1
        loaded = store.load()
        assert loaded is not None
        assert loaded.completed_count == 1

    def test_start_other_workflow_conflicts(
        self, driver: ExecutionDriver, two_step_workflow: str, circular_workflows: str
    ) -> None:
        driver.generate(two_step_workflow)
        result = driver.start(circular_workflows)
        assert result.action is StartAction.CONFLICT
        assert result.active_workflow == "simple"
