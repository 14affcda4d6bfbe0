"""Reconciliation and sync result contracts."""

from __future__ import annotations

from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, Field

from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.task import Metadata, Task


class SyncConflict(BaseModel):
    """Unresolved disagreement between a local task and its linked record.

    ``task`` is a snapshot taken when the conflict was detected; resolution
    addresses the live task through ``task.id``.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    task: Task
    record: RemoteRecord
    local_title: str
    remote_title: str
    local_estimate: int
    remote_estimate: int
    local_remaining: int
    remote_remaining: int

    @classmethod
    def between(cls, task: Task, record: RemoteRecord, metadata: Metadata) -> SyncConflict:
        return cls(
            task=task.model_copy(deep=True),
            record=record,
            local_title=task.title,
            remote_title=record.title,
            local_estimate=task.estimated_minutes,
            remote_estimate=metadata.estimated_minutes,
            local_remaining=task.remaining_minutes,
            remote_remaining=metadata.remaining_minutes,
        )


class ReconcileResult(BaseModel):
    """Decisions of one reconciliation pass.

    Tasks in ``created``, ``updated`` and ``unlinked`` are new objects; the
    input lists are never mutated.
    """

    created: list[Task] = Field(default_factory=list)
    updated: list[Task] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    unlinked: list[Task] = Field(default_factory=list)
    conflicts: list[SyncConflict] = Field(default_factory=list)
    in_sync: list[str] = Field(default_factory=list)

    @property
    def has_local_changes(self) -> bool:
        return bool(self.created or self.updated or self.deleted or self.unlinked)


class ConflictResolution(BaseModel):
    conflict_id: str
    task: Task
    keep_local: bool
    push_required: bool


class PushOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    RELINKED = "relinked"
    UNCHANGED = "unchanged"


class PushFailure(BaseModel):
    task_id: str
    title: str
    message: str


class SyncResult(BaseModel):
    collection_id: str
    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    unlinked: list[str] = Field(default_factory=list)
    conflicts: list[SyncConflict] = Field(default_factory=list)
    resolved: list[str] = Field(default_factory=list)
    pushed: dict[PushOutcome, int] = Field(default_factory=dict)
    failures: list[PushFailure] = Field(default_factory=list)
    dry_run: bool = False
