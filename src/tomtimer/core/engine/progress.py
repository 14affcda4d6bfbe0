"""Observer interface for sync passes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import PushFailure, PushOutcome, ReconcileResult, SyncResult
from tomtimer.core.contracts.task import Task


class SyncPhase(StrEnum):
    FETCH = "fetch"
    RECONCILE = "reconcile"
    PUSH = "push"


class SyncProgress(ABC):
    """Receives the events of one sync pass, in order.

    ``fetching`` and ``fetched`` bracket the remote read, ``reconciled``
    reports the local decisions once they are final, and ``pushing``
    announces how many tasks follow. Each of those tasks then produces exactly
    one ``task_pushed`` or ``task_failed``. A pass ends with ``finished``, or
    with ``failed`` naming the phase that raised.
    """

    @abstractmethod
    def fetching(self, collection_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def fetched(self, records: list[RemoteRecord]) -> None: ...  # pragma: no cover

    @abstractmethod
    def reconciled(self, result: ReconcileResult) -> None: ...  # pragma: no cover

    @abstractmethod
    def pushing(self, task_count: int) -> None: ...  # pragma: no cover

    @abstractmethod
    def task_pushed(self, task: Task, outcome: PushOutcome) -> None: ...  # pragma: no cover

    @abstractmethod
    def task_failed(self, failure: PushFailure) -> None: ...  # pragma: no cover

    @abstractmethod
    def finished(self, result: SyncResult) -> None: ...  # pragma: no cover

    @abstractmethod
    def failed(self, phase: SyncPhase, error: BaseException) -> None: ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    def fetching(self, collection_id: str) -> None:
        pass

    def fetched(self, records: list[RemoteRecord]) -> None:
        pass

    def reconciled(self, result: ReconcileResult) -> None:
        pass

    def pushing(self, task_count: int) -> None:
        pass

    def task_pushed(self, task: Task, outcome: PushOutcome) -> None:
        pass

    def task_failed(self, failure: PushFailure) -> None:
        pass

    def finished(self, result: SyncResult) -> None:
        pass

    def failed(self, phase: SyncPhase, error: BaseException) -> None:
        pass
