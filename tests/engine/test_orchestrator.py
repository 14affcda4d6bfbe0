from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from tomtimer.core.contracts.exceptions import AuthenticationError, NoCollectionSelectedError
from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import PushFailure, PushOutcome, ReconcileResult, SyncConflict, SyncResult
from tomtimer.core.contracts.task import Metadata, Task
from tomtimer.core.engine.orchestrator import SyncOrchestrator
from tomtimer.core.engine.progress import SyncPhase, SyncProgress
from tomtimer.core.metadata import encode_metadata
from tests.fakes.provider import FakeProvider
from tests.fakes.store import InMemoryTaskStore

T1 = datetime(2025, 3, 21, 9, 0, 0, tzinfo=UTC)
T2 = T1 + timedelta(hours=1)


class RecordingProgress(SyncProgress):
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def fetching(self, collection_id: str) -> None:
        self.events.append(("fetching", collection_id))

    def fetched(self, records: list[RemoteRecord]) -> None:
        self.events.append(("fetched", len(records)))

    def reconciled(self, result: ReconcileResult) -> None:
        self.events.append(("reconciled", len(result.conflicts)))

    def pushing(self, task_count: int) -> None:
        self.events.append(("pushing", task_count))

    def task_pushed(self, task: Task, outcome: PushOutcome) -> None:
        self.events.append(("pushed", outcome))

    def task_failed(self, failure: PushFailure) -> None:
        self.events.append(("push failed", failure.title))

    def finished(self, result: SyncResult) -> None:
        self.events.append(("finished", len(result.failures)))

    def failed(self, phase: SyncPhase, error: BaseException) -> None:
        self.events.append(("failed", phase))


def notes(*, est: int = 30, rem: int = 30, at: datetime = T1) -> str:
    return encode_metadata(Metadata(estimated_minutes=est, remaining_minutes=rem, modified_at=at))


def make_orchestrator(provider: FakeProvider, store: InMemoryTaskStore, **kwargs) -> SyncOrchestrator:
    kwargs.setdefault("collection_id", "inbox")
    return SyncOrchestrator(provider, store, **kwargs)


@pytest.mark.asyncio
async def test_new_local_task_is_created_remotely_and_linked() -> None:
    provider = FakeProvider()
    task = Task(title="A", estimated_minutes=30, remaining_minutes=30, modified_at=T1)
    store = InMemoryTaskStore([task])

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert result.pushed == {PushOutcome.CREATED: 1}
    linked = store.committed[task.id]
    assert linked.remote_identifier == "fake-1"
    assert provider.records["fake-1"].title == "A"


@pytest.mark.asyncio
async def test_remote_only_record_is_materialized_locally() -> None:
    provider = FakeProvider()
    provider.add("R2", "From phone", notes(est=40, rem=10))
    store = InMemoryTaskStore()

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert len(result.created) == 1
    task = store.committed[result.created[0]]
    assert (task.title, task.estimated_minutes, task.remaining_minutes, task.remote_identifier) == (
        "From phone",
        40,
        10,
        "R2",
    )
    assert result.pushed == {PushOutcome.UNCHANGED: 1}


@pytest.mark.asyncio
async def test_linked_task_missing_remotely_is_deleted_without_pushing() -> None:
    provider = FakeProvider()
    task = Task(title="Gone", remote_identifier="R3")
    store = InMemoryTaskStore([task])

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert result.deleted == [task.id]
    assert task.id not in store.committed
    assert provider.create_calls == []


@pytest.mark.asyncio
async def test_unresolved_conflict_is_reported_and_not_pushed() -> None:
    provider = FakeProvider()
    provider.add("R1", "Remote title", notes(at=T1))
    task = Task(title="Local title", modified_at=T2, remote_identifier="R1", estimated_minutes=30)
    store = InMemoryTaskStore([task])

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert [conflict.task.id for conflict in result.conflicts] == [task.id]
    assert provider.update_calls == []
    assert store.committed[task.id].title == "Local title"
    assert provider.records["R1"].title == "Remote title"


@pytest.mark.asyncio
async def test_decider_keep_local_pushes_local_values() -> None:
    provider = FakeProvider()
    provider.add("R1", "Remote title", notes(at=T1))
    task = Task(title="Local title", modified_at=T2, remote_identifier="R1", estimated_minutes=30)
    store = InMemoryTaskStore([task])
    seen: list[SyncConflict] = []

    async def keep_local(conflict: SyncConflict) -> bool | None:
        seen.append(conflict)
        return True

    result = await make_orchestrator(provider, store).sync(decide=keep_local)

    assert result is not None
    assert len(seen) == 1
    assert result.resolved == [seen[0].id]
    assert result.conflicts == []
    assert provider.records["R1"].title == "Local title"


@pytest.mark.asyncio
async def test_decider_keep_remote_updates_store() -> None:
    provider = FakeProvider()
    provider.add("R1", "Remote title", notes(est=45, rem=45, at=T1))
    task = Task(title="Local title", modified_at=T2, remote_identifier="R1", estimated_minutes=30)
    store = InMemoryTaskStore([task])

    async def keep_remote(conflict: SyncConflict) -> bool | None:
        return False

    await make_orchestrator(provider, store).sync(decide=keep_remote)

    kept = store.committed[task.id]
    assert (kept.title, kept.estimated_minutes) == ("Remote title", 45)


@pytest.mark.asyncio
async def test_sync_without_collection_raises() -> None:
    with pytest.raises(NoCollectionSelectedError):
        await make_orchestrator(FakeProvider(), InMemoryTaskStore(), collection_id=None).sync()


@pytest.mark.asyncio
async def test_authentication_failure_aborts_before_any_change() -> None:
    provider = FakeProvider()
    provider.deny_auth = True
    provider.add("R2", "Remote")
    store = InMemoryTaskStore([Task(title="Local")])

    with pytest.raises(AuthenticationError):
        await make_orchestrator(provider, store).sync()

    assert provider.fetch_calls == []
    assert store.commit_count == 0


@pytest.mark.asyncio
async def test_item_failure_is_collected_and_other_items_still_push() -> None:
    provider = FakeProvider()
    provider.fail_titles.add("Broken")
    broken = Task(title="Broken")
    fine = Task(title="Fine")
    store = InMemoryTaskStore([broken, fine])

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert [failure.task_id for failure in result.failures] == [broken.id]
    assert result.pushed == {PushOutcome.CREATED: 1}
    assert store.committed[fine.id].remote_identifier is not None
    assert store.committed[broken.id].remote_identifier is None


@pytest.mark.asyncio
async def test_auth_error_during_push_aborts_but_commits_links() -> None:
    provider = FakeProvider()
    provider.auth_error_titles.add("Revoked")
    first = Task(title="First")
    revoked = Task(title="Revoked")
    store = InMemoryTaskStore([first, revoked])
    progress = RecordingProgress()

    with pytest.raises(AuthenticationError):
        await make_orchestrator(provider, store, max_concurrent=1, progress=progress).sync()

    assert ("error", "Push") in progress.events
    assert store.commit_count == 2
    assert store.committed[first.id].remote_identifier == "fake-1"


@pytest.mark.asyncio
async def test_concurrent_sync_call_returns_none() -> None:
    provider = FakeProvider()
    store = InMemoryTaskStore()
    orchestrator = make_orchestrator(provider, store)
    gate = asyncio.Event()
    original_fetch = provider.fetch_records

    async def slow_fetch(collection_id: str) -> list[RemoteRecord]:
        await gate.wait()
        return await original_fetch(collection_id)

    provider.fetch_records = slow_fetch  # type: ignore[method-assign]

    first = asyncio.create_task(orchestrator.sync())
    await asyncio.sleep(0)
    assert orchestrator.is_syncing is True
    assert await orchestrator.sync() is None
    gate.set()
    assert await first is not None
    assert orchestrator.is_syncing is False


@pytest.mark.asyncio
async def test_local_changes_are_committed_before_push() -> None:
    provider = FakeProvider()
    provider.add("R2", "Remote")
    store = InMemoryTaskStore()
    commits_at_push: list[int] = []
    original_update = provider.update_record

    async def spy_update(remote_identifier, input):  # type: ignore[no-untyped-def]
        commits_at_push.append(store.commit_count)
        await original_update(remote_identifier, input)

    provider.update_record = spy_update  # type: ignore[method-assign]

    await make_orchestrator(provider, store).sync()

    assert commits_at_push == [1]
    assert store.commit_count == 2


@pytest.mark.asyncio
async def test_dry_run_never_commits_and_discards_staged_changes() -> None:
    provider = FakeProvider()
    provider.add("R2", "Remote")
    store = InMemoryTaskStore()

    result = await make_orchestrator(provider, store, dry_run=True).sync()

    assert result is not None
    assert result.dry_run is True
    assert store.commit_count == 0
    assert store.discard_count == 1
    assert store.all() == []


@pytest.mark.asyncio
async def test_progress_reports_pass_events_in_order() -> None:
    progress = RecordingProgress()
    provider = FakeProvider()
    provider.fail_titles.add("B")
    store = InMemoryTaskStore([Task(title="A", created_at=T1), Task(title="B", created_at=T2)])

    await make_orchestrator(provider, store, progress=progress, max_concurrent=1).sync()

    assert progress.events[:4] == [("fetching", "inbox"), ("fetched", 0), ("reconciled", 0), ("pushing", 2)]
    assert sorted(progress.events[4:6], key=str) == sorted(
        [("pushed", PushOutcome.CREATED), ("push failed", "B")], key=str
    )
    assert progress.events[6:] == [("finished", 1)]


@pytest.mark.asyncio
async def test_progress_names_failed_phase() -> None:
    progress = RecordingProgress()
    provider = FakeProvider()
    provider.deny_auth = True

    with pytest.raises(AuthenticationError):
        await make_orchestrator(provider, InMemoryTaskStore(), progress=progress).sync()

    assert progress.events == [("fetching", "inbox"), ("failed", SyncPhase.FETCH)]


@pytest.mark.asyncio
async def test_completed_task_survives_when_listing_omits_closed_records() -> None:
    provider = FakeProvider()
    provider.list_completed = False
    task = Task(title="A", estimated_minutes=30, modified_at=T1)
    task.apply_completion(30)
    store = InMemoryTaskStore([task])
    orchestrator = make_orchestrator(provider, store)

    await orchestrator.sync()
    remote_id = store.committed[task.id].remote_identifier
    assert remote_id == "fake-1"
    assert provider.records[remote_id].completed is True

    second = await orchestrator.sync()

    assert second is not None
    assert second.deleted == []
    assert store.get(task.id) is not None
    assert store.committed[task.id].remote_identifier == remote_id
    assert provider.get_calls == [remote_id]
    assert remote_id in provider.records


@pytest.mark.asyncio
async def test_completed_task_is_deleted_once_record_is_confirmed_gone() -> None:
    provider = FakeProvider()
    provider.list_completed = False
    task = Task(title="A", estimated_minutes=30, remaining_minutes=0, remote_identifier="R9", modified_at=T1)
    store = InMemoryTaskStore([task])

    result = await make_orchestrator(provider, store).sync()

    assert result is not None
    assert result.deleted == [task.id]
    assert provider.get_calls == ["R9"]
    assert task.id not in store.committed
