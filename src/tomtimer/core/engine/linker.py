"""Local/remote identity links and the per-task push."""

from __future__ import annotations

import logging

from tomtimer.core.contracts.exceptions import RemoteItemNotFoundError
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import CreateRecordInput, RemoteRecord, UpdateRecordInput
from tomtimer.core.contracts.sync import PushOutcome
from tomtimer.core.contracts.task import Task
from tomtimer.core.metadata import encode_metadata

logger = logging.getLogger(__name__)


class IdentityLinker:
    """Keeps ``Task.remote_identifier`` consistent with one remote collection.

    ``push`` and ``unlink`` mutate the task they receive; callers persist it.
    """

    def __init__(self, provider: Provider, collection_id: str) -> None:
        self._provider = provider
        self._collection_id = collection_id

    @property
    def collection_id(self) -> str:
        return self._collection_id

    async def push(self, task: Task, *, current: RemoteRecord | None = None) -> PushOutcome:
        notes = encode_metadata(task)
        if task.remote_identifier is None:
            await self._create(task, notes)
            return PushOutcome.CREATED

        update = UpdateRecordInput(title=task.title, notes=notes, completed=task.is_complete)
        if current is not None and _matches(current, update):
            logger.debug("Record %s already up to date", task.remote_identifier)
            return PushOutcome.UNCHANGED

        try:
            await self._provider.update_record(task.remote_identifier, update)
        except RemoteItemNotFoundError:
            logger.info("Record %s for task %s is gone; recreating", task.remote_identifier, task.id)
            await self._create(task, notes)
            return PushOutcome.RELINKED
        return PushOutcome.UPDATED

    async def unlink(self, task: Task) -> None:
        """Delete the linked remote record, if any, and clear the link."""
        if task.remote_identifier is None:
            return
        try:
            await self._provider.delete_record(task.remote_identifier)
        except RemoteItemNotFoundError:
            logger.debug("Record %s already deleted", task.remote_identifier)
        task.remote_identifier = None

    async def _create(self, task: Task, notes: str) -> None:
        remote_id = await self._provider.create_record(
            self._collection_id,
            CreateRecordInput(title=task.title, notes=notes, completed=task.is_complete),
        )
        task.remote_identifier = remote_id


def _matches(record: RemoteRecord, update: UpdateRecordInput) -> bool:
    return record.title == update.title and (record.notes or "") == update.notes and record.completed == update.completed
