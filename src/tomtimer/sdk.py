"""SDK composition root for tomtimer."""

from __future__ import annotations

import logging

from tomtimer.core.auth import create_token_resolver
from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import (
    ConfigError,
    NoCollectionSelectedError,
    ProviderError,
    RemoteItemNotFoundError,
    TaskNotFoundError,
)
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import Collection
from tomtimer.core.contracts.store import TaskStore
from tomtimer.core.contracts.sync import ConflictResolution, SyncConflict, SyncResult
from tomtimer.core.contracts.task import DEFAULT_ESTIMATE_MINUTES, Task
from tomtimer.core.engine import ConflictDecider, IdentityLinker, SyncOrchestrator, SyncProgress, resolve_conflict
from tomtimer.core.providers import DryRunProvider, create_provider
from tomtimer.core.store import JsonTaskStore

logger = logging.getLogger(__name__)


class TomTimer:
    """tomtimer SDK public API.

    Owns the local store and creates the provider on first use. Every remote
    operation opens the provider for its own duration.
    """

    def __init__(
        self,
        *,
        config: TomTimerConfig,
        store: TaskStore,
        provider: Provider | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._provider = provider
        self._progress = progress
        self._syncing = False

    @classmethod
    async def from_config(cls, config: TomTimerConfig, *, progress: SyncProgress | None = None) -> TomTimer:
        return cls(config=config, store=JsonTaskStore(config.store_path), progress=progress)

    @property
    def config(self) -> TomTimerConfig:
        return self._config

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    async def sync(self, *, dry_run: bool = False, decide: ConflictDecider | None = None) -> SyncResult | None:
        """Run one sync pass against the configured collection.

        Returns ``None`` when a pass is already running on this instance.
        """
        if self._syncing:
            logger.info("Sync already in progress; ignoring request")
            return None
        if not self._config.collection_id:
            raise NoCollectionSelectedError("No remote collection selected; run 'tomtimer init' or set collection_id")

        self._syncing = True
        try:
            provider = await self._resolve_provider()
            if dry_run:
                provider = DryRunProvider(provider)
            async with provider:
                orchestrator = SyncOrchestrator(
                    provider,
                    self._store,
                    collection_id=self._config.collection_id,
                    progress=self._progress,
                    max_concurrent=self._config.max_concurrent,
                    dry_run=dry_run,
                )
                return await orchestrator.sync(decide=decide)
        except* ProviderError as provider_errors:
            raise provider_errors.exceptions[0] from None
        finally:
            self._syncing = False

    async def resolve_conflict(self, conflict: SyncConflict, *, keep_local: bool) -> ConflictResolution:
        """Settle a conflict reported by an earlier pass and persist the outcome.

        Keeping the local task pushes it right away. Keeping the remote record
        re-reads it first so the newest remote values win.
        """
        if not self._config.collection_id:
            raise NoCollectionSelectedError("No remote collection selected")
        task = self._require_task(conflict.task.id)
        live_conflict = conflict.model_copy(update={"task": task})

        provider = await self._resolve_provider()
        async with provider:
            if keep_local:
                resolution = resolve_conflict(live_conflict, keep_local=True)
                await IdentityLinker(provider, self._config.collection_id).push(resolution.task)
            else:
                try:
                    record = await provider.get_record(conflict.record.remote_identifier)
                except RemoteItemNotFoundError:
                    logger.info("Record %s vanished; using the copy from the sync pass", conflict.record.remote_identifier)
                    record = None
                resolution = resolve_conflict(live_conflict, keep_local=False, record=record)

        self._store.upsert(resolution.task)
        self._store.commit()
        return resolution

    def list_tasks(self) -> list[Task]:
        return sorted(self._store.all(), key=lambda task: task.created_at)

    def get_task(self, task_id: str) -> Task:
        return self._require_task(task_id)

    def add_task(self, title: str, estimated_minutes: int = DEFAULT_ESTIMATE_MINUTES) -> Task:
        task = Task(title=title, estimated_minutes=estimated_minutes, remaining_minutes=estimated_minutes)
        self._store.upsert(task)
        self._store.commit()
        return task

    def log_minutes(self, task_id: str, minutes: int) -> Task:
        """Record worked minutes against a task's remaining time."""
        task = self._require_task(task_id)
        task.apply_completion(minutes)
        self._store.upsert(task)
        self._store.commit()
        return task

    async def delete_task(self, task_id: str) -> Task:
        """Delete a task locally and its linked remote record, if any."""
        task = self._require_task(task_id)
        if task.is_linked:
            provider = await self._resolve_provider()
            async with provider:
                await IdentityLinker(provider, self._config.collection_id or "").unlink(task)
        self._store.delete(task.id)
        self._store.commit()
        return task

    async def list_collections(self) -> list[Collection]:
        provider = await self._resolve_provider()
        async with provider:
            await provider.authenticate()
            return await provider.list_collections()

    def _require_task(self, task_id: str) -> Task:
        task = self._store.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"No task with id {task_id!r}")
        return task

    async def _resolve_provider(self) -> Provider:
        if self._provider is not None:
            return self._provider

        token = await create_token_resolver(self._config).resolve()
        try:
            return create_provider(self._config.provider, token=token, base_url=self._config.base_url)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
