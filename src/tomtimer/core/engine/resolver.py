"""Conflict resolution."""

from __future__ import annotations

import logging

from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import ConflictResolution, SyncConflict
from tomtimer.core.contracts.task import utcnow
from tomtimer.core.engine.reconciler import remote_title
from tomtimer.core.metadata import decode_metadata

logger = logging.getLogger(__name__)


def resolve_conflict(
    conflict: SyncConflict,
    *,
    keep_local: bool,
    record: RemoteRecord | None = None,
) -> ConflictResolution:
    """Settle a conflict in favour of one side, all-or-nothing.

    Keeping the local side returns the task untouched and asks for a push.
    Keeping the remote side re-decodes *record* (or the record captured with
    the conflict) and overwrites every synced field of a copy of the task.
    """
    if keep_local:
        logger.debug("Conflict %s: keeping local task %s", conflict.id, conflict.task.id)
        return ConflictResolution(
            conflict_id=conflict.id,
            task=conflict.task.model_copy(deep=True),
            keep_local=True,
            push_required=True,
        )

    source = record or conflict.record
    metadata = decode_metadata(source.notes, fallback_modified_at=source.last_modified or utcnow())
    task = conflict.task.model_copy(deep=True)
    task.apply_metadata(remote_title(source, task.title), metadata)
    logger.debug("Conflict %s: keeping remote record %s", conflict.id, source.remote_identifier)
    return ConflictResolution(conflict_id=conflict.id, task=task, keep_local=False, push_required=False)
