"""Reconciliation of local tasks against one fetched remote collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import ReconcileResult, SyncConflict
from tomtimer.core.contracts.task import Metadata, Task, utcnow
from tomtimer.core.metadata import decode_metadata

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


def remote_title(record: RemoteRecord, fallback: str = UNTITLED) -> str:
    return record.title or fallback


def differs(task: Task, record: RemoteRecord, metadata: Metadata) -> bool:
    return (
        task.title != remote_title(record, task.title)
        or task.estimated_minutes != metadata.estimated_minutes
        or task.remaining_minutes != metadata.remaining_minutes
    )


class Reconciler:
    """Pure diff between local tasks and fetched remote records.

    Per record the pass decides exactly one of: create a local task, apply the
    remote copy onto the linked task, report a conflict, or leave an identical
    pair alone. Linked tasks whose record is absent are marked for deletion.
    Only a local ``modified_at`` strictly newer than the remote one protects
    local values; equal timestamps let the remote copy win.
    """

    def reconcile(
        self,
        local_tasks: Iterable[Task],
        remote_records: Iterable[RemoteRecord],
        *,
        now: datetime | None = None,
    ) -> ReconcileResult:
        pass_time = now or utcnow()
        result = ReconcileResult()

        local_by_remote_id: dict[str, Task] = {}
        for task in local_tasks:
            if task.remote_identifier is None:
                continue
            if task.remote_identifier in local_by_remote_id:
                logger.warning(
                    "Task %s shares remote identifier %r with task %s; clearing its link",
                    task.id,
                    task.remote_identifier,
                    local_by_remote_id[task.remote_identifier].id,
                )
                result.unlinked.append(task.model_copy(update={"remote_identifier": None}, deep=True))
                continue
            local_by_remote_id[task.remote_identifier] = task

        processed: set[str] = set()
        for record in remote_records:
            remote_id = record.remote_identifier
            if remote_id in processed:
                logger.warning("Ignoring duplicate remote record %r", remote_id)
                continue
            processed.add(remote_id)

            metadata = decode_metadata(record.notes, fallback_modified_at=record.last_modified or pass_time)
            existing = local_by_remote_id.get(remote_id)
            if existing is None:
                result.created.append(self._materialize(record, metadata))
                continue

            if existing.modified_at > metadata.modified_at:
                if differs(existing, record, metadata):
                    result.conflicts.append(SyncConflict.between(existing, record, metadata))
                else:
                    result.in_sync.append(existing.id)
                continue

            updated = existing.model_copy(deep=True)
            updated.apply_metadata(remote_title(record, existing.title), metadata)
            result.updated.append(updated)

        for remote_id, task in local_by_remote_id.items():
            if remote_id not in processed:
                result.deleted.append(task.id)

        logger.debug(
            "Reconciled: %d created, %d updated, %d deleted, %d conflicts, %d in sync",
            len(result.created),
            len(result.updated),
            len(result.deleted),
            len(result.conflicts),
            len(result.in_sync),
        )
        return result

    @staticmethod
    def _materialize(record: RemoteRecord, metadata: Metadata) -> Task:
        task = Task(title=remote_title(record), remote_identifier=record.remote_identifier)
        task.apply_metadata(remote_title(record), metadata)
        return task
