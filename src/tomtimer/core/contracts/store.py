"""Local task store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tomtimer.core.contracts.task import Task


class TaskStore(ABC):
    """Durable store of local tasks keyed by ``Task.id``.

    ``upsert`` and ``delete`` stage changes; nothing becomes durable until
    ``commit`` writes every staged change at once. ``discard`` drops staged
    changes and reloads the last committed state.
    """

    @abstractmethod
    def all(self) -> list[Task]: ...  # pragma: no cover

    @abstractmethod
    def get(self, task_id: str) -> Task | None: ...  # pragma: no cover

    @abstractmethod
    def upsert(self, task: Task) -> None: ...  # pragma: no cover

    @abstractmethod
    def delete(self, task_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def commit(self) -> None: ...  # pragma: no cover

    @abstractmethod
    def discard(self) -> None: ...  # pragma: no cover
