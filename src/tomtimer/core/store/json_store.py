"""JSON-file task store with atomic commits."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from tomtimer.core.contracts.exceptions import StoreError
from tomtimer.core.contracts.store import TaskStore
from tomtimer.core.contracts.task import Task

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class TaskDocument(BaseModel):
    version: int = STORE_VERSION
    tasks: list[Task] = Field(default_factory=list)


class JsonTaskStore(TaskStore):
    """Keeps every task in one JSON document.

    Reads and staged writes work on an in-memory copy. ``commit`` serialises
    the whole document to a temporary file in the same directory and moves
    it over the old one, so readers see either the previous or the new state.
    Tasks handed out are copies; callers ``upsert`` to change them.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._committed = self._load()
        self._staged = dict(self._committed)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def dirty(self) -> bool:
        return self._staged != self._committed

    def all(self) -> list[Task]:
        return [task.model_copy(deep=True) for task in self._staged.values()]

    def get(self, task_id: str) -> Task | None:
        task = self._staged.get(task_id)
        return task.model_copy(deep=True) if task is not None else None

    def upsert(self, task: Task) -> None:
        self._staged[task.id] = task.model_copy(deep=True)

    def delete(self, task_id: str) -> None:
        self._staged.pop(task_id, None)

    def commit(self) -> None:
        if not self.dirty and self._path.exists():
            return
        document = TaskDocument(tasks=list(self._staged.values()))
        self._write(document.model_dump_json(indent=2))
        self._committed = dict(self._staged)
        logger.debug("Committed %d tasks to %s", len(self._staged), self._path)

    def discard(self) -> None:
        self._staged = dict(self._committed)

    def _load(self) -> dict[str, Task]:
        if not self._path.exists():
            return {}
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
            document = TaskDocument.model_validate(payload)
        except OSError as exc:
            raise StoreError(f"failed reading task store: {self._path}") from exc
        except json.JSONDecodeError as exc:
            raise StoreError(f"invalid JSON in task store: {self._path}") from exc
        except ValidationError as exc:
            raise StoreError(f"invalid task store {self._path}: {exc}") from exc
        if document.version > STORE_VERSION:
            raise StoreError(f"task store {self._path} has unsupported version {document.version}")
        return {task.id: task for task in document.tasks}

    def _write(self, content: str) -> None:
        tmp_path: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = handle.name
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"failed to commit task store: {self._path}") from exc
