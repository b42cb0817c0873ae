"""Task store for plait.

The task store is the single source of truth for execution progress. Every
mutation rewrites the whole document; completion of the last task removes
it, so "no store" also means "nothing left to do".

Two sessions must not mutate the same store path at the same time: there
is no locking.
"""

import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from ..errors import StoreMissingError, UnknownTaskIdError
from ..models import TaskStoreDocument

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    """Persistence interface used by the execution driver."""

    def save(self, document: TaskStoreDocument) -> None: ...

    def load(self) -> TaskStoreDocument | None: ...

    def delete(self) -> bool: ...

    def set_completed(self, task_id: str, completed: bool = True) -> TaskStoreDocument: ...


def _set_completed(store: TaskStore, task_id: str, completed: bool) -> TaskStoreDocument:
    """Load, update one task's completion flag, and save.

    Raises:
        StoreMissingError: If the store has no document
        UnknownTaskIdError: If the id is not in the document
    """
    document = store.load()
    if document is None:
        raise StoreMissingError()

    task = document.find(task_id)
    if task is None:
        raise UnknownTaskIdError(task_id, document.task_ids)

    task.completed = completed
    store.save(document)
    return document


class JsonTaskStore:
    """Task store backed by a JSON file.

    Args:
        path: Location of the tasks file; parent directories are created on save
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, document: TaskStoreDocument) -> None:
        """Write the whole document, replacing any previous file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_text(document.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def load(self) -> TaskStoreDocument | None:
        """Read the document; a missing or corrupt file reads as no document."""
        if not self.path.exists():
            return None

        try:
            return TaskStoreDocument.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable tasks file %s: %s", self.path, e)
            return None

    def delete(self) -> bool:
        """Remove the tasks file. Returns False if there was nothing to remove."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True

    def set_completed(self, task_id: str, completed: bool = True) -> TaskStoreDocument:
        return _set_completed(self, task_id, completed)


class InMemoryTaskStore:
    """Task store that keeps the document in memory.

    Documents are copied on save and load, matching the file store's
    behaviour of handing out independent snapshots.
    """

    def __init__(self, document: TaskStoreDocument | None = None) -> None:
        self._document = document.model_copy(deep=True) if document else None

    def exists(self) -> bool:
        return self._document is not None

    def save(self, document: TaskStoreDocument) -> None:
        self._document = document.model_copy(deep=True)

    def load(self) -> TaskStoreDocument | None:
        if self._document is None:
            return None
        return self._document.model_copy(deep=True)

    def delete(self) -> bool:
        existed = self._document is not None
        self._document = None
        return existed

    def set_completed(self, task_id: str, completed: bool = True) -> TaskStoreDocument:
        return _set_completed(self, task_id, completed)
