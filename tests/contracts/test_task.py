from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from tomtimer.core.contracts.task import Metadata, Task

T1 = datetime(2025, 3, 21, 9, 0, 0, tzinfo=UTC)


def test_remaining_defaults_to_estimate() -> None:
    task = Task(title="x", estimated_minutes=40)

    assert task.remaining_minutes == 40
    assert not task.is_linked
    assert not task.is_complete


def test_remaining_is_clamped_to_estimate() -> None:
    assert Task(title="x", estimated_minutes=10, remaining_minutes=30).remaining_minutes == 10


def test_naive_timestamps_are_treated_as_utc() -> None:
    task = Task(title="x", modified_at=datetime(2025, 3, 21, 9, 0, 0))

    assert task.modified_at == T1


def test_aware_timestamps_are_normalized_to_utc() -> None:
    task = Task(title="x", modified_at=datetime(2025, 3, 21, 11, 0, 0, tzinfo=timezone(timedelta(hours=2))))

    assert task.modified_at == T1
    assert task.modified_at.tzinfo == UTC


def test_apply_completion_never_goes_negative_and_bumps_timestamp() -> None:
    task = Task(title="x", estimated_minutes=25, modified_at=T1)

    task.apply_completion(10)
    assert task.remaining_minutes == 15
    task.apply_completion(100)
    assert task.remaining_minutes == 0
    assert task.is_complete
    assert task.modified_at > T1


def test_negative_completion_is_ignored() -> None:
    task = Task(title="x", estimated_minutes=25)

    task.apply_completion(-5)

    assert task.remaining_minutes == 25


def test_update_estimates_clamps_remaining() -> None:
    task = Task(title="x", modified_at=T1)

    task.update_estimates(20, 45)
    assert (task.estimated_minutes, task.remaining_minutes) == (20, 20)
    task.update_estimates(-5, 3)
    assert (task.estimated_minutes, task.remaining_minutes) == (0, 0)
    assert task.modified_at > T1


def test_rename_and_set_active_bump_timestamp() -> None:
    task = Task(title="x", modified_at=T1)
    task.rename("y")
    assert task.modified_at > T1

    task.touch(T1)
    task.set_active(True)
    assert task.is_active
    assert task.modified_at > T1


def test_apply_metadata_adopts_remote_timestamp() -> None:
    task = Task(title="x")
    metadata = Metadata(estimated_minutes=15, remaining_minutes=5, is_active=True, modified_at=T1)

    task.apply_metadata("remote", metadata)

    assert task.metadata() == metadata
    assert task.title == "remote"
