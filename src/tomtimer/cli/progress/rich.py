"""Rich rendering of sync pass events."""

from __future__ import annotations

from collections import Counter
from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn

from tomtimer.cli.common import plural
from tomtimer.core.contracts.record import RemoteRecord
from tomtimer.core.contracts.sync import PushFailure, PushOutcome, ReconcileResult, SyncResult
from tomtimer.core.contracts.task import Task
from tomtimer.core.engine.progress import SyncPhase, SyncProgress


class RichSyncProgress(SyncProgress):
    """Shows a fetch spinner, a reconcile summary and a push bar on stderr.

    The push bar's label keeps a running count per push outcome; failed
    pushes are printed as they happen.

        with RichSyncProgress() as progress:
            result = await timer.sync()
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description}"),
            BarColumn(bar_width=24),
            MofNCompleteColumn(),
            console=self._console,
        )
        self._fetch_id: TaskID | None = None
        self._push_id: TaskID | None = None
        self._push_total = 0
        self._outcomes: Counter[PushOutcome] = Counter()
        self._failures = 0

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    @property
    def outcomes(self) -> dict[PushOutcome, int]:
        return dict(self._outcomes)

    def fetching(self, collection_id: str) -> None:
        self._fetch_id = self._progress.add_task(f"Fetching {collection_id}", total=None)

    def fetched(self, records: list[RemoteRecord]) -> None:
        if self._fetch_id is not None:
            self._progress.update(
                self._fetch_id, description=f"Fetched {plural(len(records), 'record')}", total=1, completed=1
            )

    def reconciled(self, result: ReconcileResult) -> None:
        self._console.print(
            "Local: {} new, {} updated, {} deleted; {}".format(
                len(result.created),
                len(result.updated),
                len(result.deleted),
                plural(len(result.conflicts), "conflict"),
            )
        )

    def pushing(self, task_count: int) -> None:
        self._outcomes.clear()
        self._failures = 0
        self._push_total = task_count
        self._push_id = self._progress.add_task(self.push_label(), total=task_count)

    def task_pushed(self, task: Task, outcome: PushOutcome) -> None:
        self._outcomes[outcome] += 1
        self._advance_push()

    def task_failed(self, failure: PushFailure) -> None:
        self._failures += 1
        self._console.print(f"[red]Push failed[/red] {failure.title}: {failure.message}")
        self._advance_push()

    def finished(self, result: SyncResult) -> None:
        if self._push_id is not None:
            self._progress.update(self._push_id, completed=self._push_total)

    def failed(self, phase: SyncPhase, error: BaseException) -> None:
        self._console.print(f"[red]✗ {phase.value} failed:[/red] {error}")

    def push_label(self) -> str:
        counts = [f"{self._outcomes[outcome]} {outcome.value}" for outcome in PushOutcome if self._outcomes[outcome]]
        if self._failures:
            counts.append(f"{self._failures} failed")
        return "Pushing" + (f" ({', '.join(counts)})" if counts else "")

    def _advance_push(self) -> None:
        if self._push_id is not None:
            self._progress.update(self._push_id, advance=1, description=self.push_label())
