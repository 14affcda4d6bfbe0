"""Sync pass orchestration: fetch, reconcile, commit, decide, push."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tomtimer.core.contracts.exceptions import (
    AuthenticationError,
    NoCollectionSelectedError,
    ProviderError,
    RemoteItemNotFoundError,
    TomTimerError,
)
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.store import TaskStore
from tomtimer.core.contracts.sync import PushFailure, ReconcileResult, SyncConflict, SyncResult
from tomtimer.core.contracts.task import Task, utcnow
from tomtimer.core.engine.linker import IdentityLinker
from tomtimer.core.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from tomtimer.core.engine.reconciler import Reconciler
from tomtimer.core.engine.resolver import resolve_conflict
from tomtimer.core.metadata import MetadataFormat, detect_format

T = TypeVar("T")
logger = logging.getLogger(__name__)

# True keeps the local task, False keeps the remote record, None leaves the conflict open.
ConflictDecider = Callable[[SyncConflict], Awaitable[bool | None]]


class SyncOrchestrator:
    """Runs sync passes for one remote collection.

    A pass authenticates, fetches the collection, reconciles it against the
    local store and commits the local changes in one step before anything is
    written remotely. Conflicts are offered to an optional decider; those left
    undecided are excluded from the push and detected again next pass. Every
    other task is then pushed concurrently and new links are committed, also
    when the push phase is aborted.
    """

    def __init__(
        self,
        provider: Provider,
        store: TaskStore,
        *,
        collection_id: str | None,
        progress: SyncProgress | None = None,
        max_concurrent: int = 4,
        dry_run: bool = False,
        reconciler: Reconciler | None = None,
    ) -> None:
        self._provider = provider
        self._store = store
        self._collection_id = collection_id
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._dry_run = dry_run
        self._reconciler = reconciler or Reconciler()
        self._is_syncing = False

    @property
    def is_syncing(self) -> bool:
        return self._is_syncing

    @property
    def collection_id(self) -> str | None:
        return self._collection_id

    async def sync(self, *, decide: ConflictDecider | None = None) -> SyncResult | None:
        """Run one pass; returns ``None`` if a pass is already running.

        Raises:
            NoCollectionSelectedError: If no remote collection is configured.
            AuthenticationError: If the provider denies access.
        """
        if self._is_syncing:
            logger.info("Sync already in progress; ignoring request")
            return None
        if not self._collection_id:
            raise NoCollectionSelectedError("No remote collection selected")

        self._is_syncing = True
        try:
            return await self._run(self._collection_id, decide)
        finally:
            self._is_syncing = False
            if self._dry_run:
                self._store.discard()

    async def _run(self, collection_id: str, decide: ConflictDecider | None) -> SyncResult:
        records = await self._fetch(collection_id)
        reconciled = await self._reconcile(records)

        result = SyncResult(
            collection_id=collection_id,
            created=[task.id for task in reconciled.created],
            updated=[task.id for task in reconciled.updated],
            deleted=list(reconciled.deleted),
            unlinked=[task.id for task in reconciled.unlinked],
            dry_run=self._dry_run,
        )
        self._apply(reconciled)

        unresolved = await self._decide(reconciled.conflicts, decide, result)
        result.conflicts = unresolved

        current: dict[str, RemoteRecord] = {}
        for record in records:
            current.setdefault(record.remote_identifier, record)
        excluded = {conflict.task.id for conflict in unresolved}
        await self._push(current, excluded, result)

        logger.info(
            "Sync of %s: %d created, %d updated, %d deleted locally; %d conflicts, %d push failures",
            collection_id,
            len(result.created),
            len(result.updated),
            len(result.deleted),
            len(result.conflicts),
            len(result.failures),
        )
        self._progress.finished(result)
        return result

    async def _fetch(self, collection_id: str) -> list[RemoteRecord]:
        self._progress.fetching(collection_id)
        try:
            await self._provider.authenticate()
            records = await self._provider.fetch_records(collection_id)
        except BaseException as exc:
            self._progress.failed(SyncPhase.FETCH, exc)
            raise
        self._progress.fetched(records)
        return records

    async def _reconcile(self, records: list[RemoteRecord]) -> ReconcileResult:
        try:
            reconciled = self._reconciler.reconcile(self._store.all(), records, now=utcnow())
            await self._confirm_deletions(reconciled)
        except BaseException as exc:
            self._progress.failed(SyncPhase.RECONCILE, exc)
            raise
        self._progress.reconciled(reconciled)
        return reconciled

    async def _confirm_deletions(self, reconciled: ReconcileResult) -> None:
        """Keep completed tasks whose record still exists but was not listed.

        Remote listings may leave out closed records, so absence only proves
        deletion for open tasks.
        """
        confirmed: list[str] = []
        for task_id in reconciled.deleted:
            task = self._store.get(task_id)
            if task is None or task.remote_identifier is None or not task.is_complete:
                confirmed.append(task_id)
                continue
            try:
                await self._guarded(self._provider.get_record(task.remote_identifier))
            except RemoteItemNotFoundError:
                confirmed.append(task_id)
                continue
            except AuthenticationError:
                raise
            except ProviderError as exc:
                logger.warning(
                    "Could not confirm deletion of record %s; keeping task %s: %s", task.remote_identifier, task.id, exc
                )
            else:
                logger.debug("Completed record %s still exists; keeping task %s", task.remote_identifier, task.id)
            reconciled.in_sync.append(task_id)
        reconciled.deleted = confirmed

    def _apply(self, reconciled: ReconcileResult) -> None:
        for task in [*reconciled.created, *reconciled.updated, *reconciled.unlinked]:
            self._store.upsert(task)
        for task_id in reconciled.deleted:
            self._store.delete(task_id)
        self._commit()

    async def _decide(
        self,
        conflicts: list[SyncConflict],
        decide: ConflictDecider | None,
        result: SyncResult,
    ) -> list[SyncConflict]:
        if decide is None:
            return list(conflicts)
        unresolved: list[SyncConflict] = []
        for conflict in conflicts:
            choice = await decide(conflict)
            if choice is None:
                unresolved.append(conflict)
                continue
            resolution = resolve_conflict(conflict, keep_local=choice)
            if not resolution.keep_local:
                self._store.upsert(resolution.task)
            result.resolved.append(conflict.id)
        return unresolved

    async def _push(self, current: dict[str, RemoteRecord], excluded: set[str], result: SyncResult) -> None:
        linker = IdentityLinker(self._provider, result.collection_id)
        tasks = [task for task in self._store.all() if task.id not in excluded]
        self._progress.pushing(len(tasks))
        try:
            try:
                async with asyncio.TaskGroup() as tg:
                    for task in tasks:
                        tg.create_task(self._push_one(linker, task, current, result))
            except* TomTimerError as errors:
                raise errors.exceptions[0] from None
        except BaseException as exc:
            self._progress.failed(SyncPhase.PUSH, exc)
            raise
        finally:
            self._commit()

    async def _push_one(
        self,
        linker: IdentityLinker,
        task: Task,
        current: dict[str, RemoteRecord],
        result: SyncResult,
    ) -> None:
        pushed = task.model_copy(deep=True)
        record = current.get(pushed.remote_identifier) if pushed.remote_identifier else None
        if record is not None and detect_format(record.notes) in {MetadataFormat.LEGACY, MetadataFormat.JSON}:
            logger.debug("Upgrading metadata of record %s", record.remote_identifier)

        try:
            outcome = await self._guarded(linker.push(pushed, current=record))
        except AuthenticationError:
            raise
        except ProviderError as exc:
            logger.warning("Push of task %s (%s) failed: %s", task.id, task.title, exc)
            failure = PushFailure(task_id=task.id, title=task.title, message=str(exc))
            result.failures.append(failure)
            self._progress.task_failed(failure)
            return

        if pushed.remote_identifier != task.remote_identifier:
            self._store.upsert(pushed)
        result.pushed[outcome] = result.pushed.get(outcome, 0) + 1
        self._progress.task_pushed(pushed, outcome)

    def _commit(self) -> None:
        if self._dry_run:
            return
        self._store.commit()

    async def _guarded(self, op: Awaitable[T]) -> T:
        async with self._semaphore:
            return await op
