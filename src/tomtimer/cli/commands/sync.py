"""Sync command."""

from __future__ import annotations

import argparse

import questionary

from tomtimer.cli.common import plural
from tomtimer.cli.progress.rich import RichSyncProgress
from tomtimer.core.contracts.sync import PushOutcome, SyncConflict, SyncResult


class InteractiveConflictDecider:
    """Asks per conflict whether to keep the local or the remote side.

    Choosing "Skip all" leaves the current and every later conflict open.
    """

    def __init__(self) -> None:
        self._skip_all = False

    async def __call__(self, conflict: SyncConflict) -> bool | None:
        if self._skip_all:
            return None
        print(format_conflict(conflict))
        choice = await questionary.select(
            "Keep which version?",
            choices=[
                questionary.Choice("Keep local", value="local"),
                questionary.Choice("Keep remote", value="remote"),
                questionary.Choice("Skip", value="skip"),
                questionary.Choice("Skip all", value="skip-all"),
            ],
            default="skip",
        ).ask_async()
        if choice is None:
            raise KeyboardInterrupt
        if choice == "skip-all":
            self._skip_all = True
            return None
        if choice == "skip":
            return None
        return choice == "local"


def format_conflict(conflict: SyncConflict) -> str:
    return "\n".join(
        [
            "",
            f"Conflict on {conflict.local_title!r}",
            f"  Local:   {conflict.local_title}  ({conflict.local_remaining}/{conflict.local_estimate} min)",
            f"  Remote:  {conflict.remote_title}  ({conflict.remote_remaining}/{conflict.remote_estimate} min)",
        ]
    )


def format_sync_summary(result: SyncResult) -> str:
    mode = "dry-run" if result.dry_run else "apply"
    pushed = result.pushed
    lines = [
        "",
        f"tomtimer - sync complete ({mode})",
        "",
        f"  Collection:  {result.collection_id}",
        "",
        "  Local:       {} created, {} updated, {} deleted".format(
            len(result.created), len(result.updated), len(result.deleted)
        ),
        "  Remote:      {} created, {} updated, {} unchanged".format(
            pushed.get(PushOutcome.CREATED, 0) + pushed.get(PushOutcome.RELINKED, 0),
            pushed.get(PushOutcome.UPDATED, 0),
            pushed.get(PushOutcome.UNCHANGED, 0),
        ),
    ]
    if result.unlinked:
        lines.append(f"  Relinked:    {plural(len(result.unlinked), 'duplicate link')} cleared")
    if result.resolved:
        lines.append(f"  Resolved:    {plural(len(result.resolved), 'conflict')}")
    if result.conflicts:
        lines.append(f"  Conflicts:   {len(result.conflicts)} left for the next sync")
        for conflict in result.conflicts:
            lines.append(f"    - {conflict.local_title} / {conflict.remote_title}")
    if result.failures:
        lines.append(f"  Failures:    {len(result.failures)}")
        for failure in result.failures:
            lines.append(f"    - {failure.title}: {failure.message}")
    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_sync(args: argparse.Namespace) -> SyncResult | None:
    import tomtimer.cli as cli

    config = cli.load_config(args.config)
    decide = InteractiveConflictDecider() if args.interactive else None

    if args.verbose or args.interactive:
        timer = await cli.TomTimer.from_config(config)
        result = await timer.sync(dry_run=args.dry_run, decide=decide)
    else:
        with RichSyncProgress() as progress:
            timer = await cli.TomTimer.from_config(config, progress=progress)
            result = await timer.sync(dry_run=args.dry_run)

    if result is None:
        print("A sync is already running.")
        return None
    print(format_sync_summary(result))
    return result


__all__ = ["InteractiveConflictDecider", "format_conflict", "format_sync_summary", "run_sync"]
