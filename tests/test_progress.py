"""Tests for RichSyncProgress and NullSyncProgress."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from tomtimer.cli.progress import RichSyncProgress
from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import PushFailure, PushOutcome, ReconcileResult, SyncResult
from tomtimer.core.contracts.task import Task
from tomtimer.core.engine.progress import NullSyncProgress, SyncPhase, SyncProgress


def _console() -> Console:
    return Console(file=StringIO(), force_terminal=False, width=100)


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


class TestNullSyncProgress:
    def test_is_a_sync_progress(self) -> None:
        assert issubclass(NullSyncProgress, SyncProgress)

    def test_pass_events_are_noop(self) -> None:
        progress = NullSyncProgress()
        progress.fetching("inbox")
        progress.fetched([])
        progress.reconciled(ReconcileResult())
        progress.pushing(1)
        progress.task_pushed(Task(title="A"), PushOutcome.CREATED)
        progress.task_failed(PushFailure(task_id="t", title="A", message="boom"))
        progress.finished(SyncResult(collection_id="inbox"))
        progress.failed(SyncPhase.PUSH, RuntimeError("boom"))


class TestRichSyncProgress:
    def test_context_manager(self) -> None:
        progress = RichSyncProgress(console=_console())
        with progress as p:
            assert p is progress

    def test_fetched_completes_fetch_spinner(self) -> None:
        records = [RemoteRecord(remote_identifier="1"), RemoteRecord(remote_identifier="2")]
        with RichSyncProgress(console=_console()) as progress:
            progress.fetching("inbox")
            progress.fetched(records)
            task = progress._progress.tasks[0]

        assert task.description == "Fetched 2 records"
        assert (task.total, task.completed) == (1, 1)

    def test_reconciled_prints_local_summary(self) -> None:
        console = _console()
        result = ReconcileResult(created=[Task(title="A")], deleted=["x", "y"])
        with RichSyncProgress(console=console) as progress:
            progress.reconciled(result)

        assert "Local: 1 new, 0 updated, 2 deleted; 0 conflicts" in _output(console)

    def test_push_label_counts_outcomes_and_failures(self) -> None:
        console = _console()
        with RichSyncProgress(console=console) as progress:
            progress.pushing(4)
            progress.task_pushed(Task(title="A"), PushOutcome.UPDATED)
            progress.task_pushed(Task(title="B"), PushOutcome.CREATED)
            progress.task_pushed(Task(title="C"), PushOutcome.UPDATED)
            progress.task_failed(PushFailure(task_id="d", title="D", message="rejected"))
            task = progress._progress.tasks[0]

        assert progress.push_label() == "Pushing (1 created, 2 updated, 1 failed)"
        assert progress.outcomes == {PushOutcome.CREATED: 1, PushOutcome.UPDATED: 2}
        assert task.description == progress.push_label()
        assert task.completed == 4
        assert "Push failed D: rejected" in _output(console)

    def test_pushing_resets_counts(self) -> None:
        with RichSyncProgress(console=_console()) as progress:
            progress.pushing(1)
            progress.task_pushed(Task(title="A"), PushOutcome.CREATED)
            progress.pushing(0)

        assert progress.push_label() == "Pushing"
        assert progress.outcomes == {}

    def test_finished_fills_push_bar(self) -> None:
        with RichSyncProgress(console=_console()) as progress:
            progress.pushing(3)
            progress.task_pushed(Task(title="A"), PushOutcome.UNCHANGED)
            progress.finished(SyncResult(collection_id="inbox"))
            task = progress._progress.tasks[0]

        assert task.completed == 3

    def test_events_before_their_phase_are_ignored(self) -> None:
        with RichSyncProgress(console=_console()) as progress:
            progress.fetched([])
            progress.task_pushed(Task(title="A"), PushOutcome.CREATED)
            progress.finished(SyncResult(collection_id="inbox"))

        assert progress._progress.tasks == []

    def test_failed_names_phase(self) -> None:
        console = _console()
        with RichSyncProgress(console=console) as progress:
            progress.failed(SyncPhase.RECONCILE, RuntimeError("boom"))

        assert "✗ reconcile failed: boom" in _output(console)
