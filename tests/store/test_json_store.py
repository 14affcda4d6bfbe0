from __future__ import annotations

import json
from pathlib import Path

import pytest

from tomtimer.core.contracts.exceptions import StoreError
from tomtimer.core.contracts.task import Task
from tomtimer.core.store import JsonTaskStore


def test_missing_file_starts_empty(tmp_path: Path) -> None:
    store = JsonTaskStore(tmp_path / "tasks.json")

    assert store.all() == []
    assert store.get("nope") is None


def test_staged_changes_are_invisible_on_disk_until_commit(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = JsonTaskStore(path)
    task = Task(title="Write", estimated_minutes=30)

    store.upsert(task)
    assert store.get(task.id) == task
    assert not path.exists()

    store.commit()

    reloaded = JsonTaskStore(path)
    assert reloaded.all() == [task]


def test_commit_replaces_file_atomically_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = JsonTaskStore(path)
    first = Task(title="first")
    store.upsert(first)
    store.commit()

    store.delete(first.id)
    store.upsert(Task(title="second"))
    store.commit()

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert [task["title"] for task in payload["tasks"]] == ["second"]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.json"]


def test_discard_restores_last_committed_state(tmp_path: Path) -> None:
    store = JsonTaskStore(tmp_path / "tasks.json")
    kept = Task(title="kept")
    store.upsert(kept)
    store.commit()

    store.delete(kept.id)
    store.upsert(Task(title="dropped"))
    store.discard()

    assert [task.title for task in store.all()] == ["kept"]
    assert not store.dirty


def test_returned_tasks_are_copies(tmp_path: Path) -> None:
    store = JsonTaskStore(tmp_path / "tasks.json")
    task = Task(title="original")
    store.upsert(task)

    fetched = store.get(task.id)
    assert fetched is not None
    fetched.rename("changed")

    assert store.get(task.id).title == "original"  # type: ignore[union-attr]


def test_invalid_json_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(StoreError, match="invalid JSON"):
        JsonTaskStore(path)


def test_invalid_document_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"tasks": [{"estimated_minutes": -1}]}), encoding="utf-8")

    with pytest.raises(StoreError, match="invalid task store"):
        JsonTaskStore(path)


def test_newer_store_version_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"version": 99, "tasks": []}), encoding="utf-8")

    with pytest.raises(StoreError, match="unsupported version"):
        JsonTaskStore(path)


def test_commit_failure_raises_store_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = JsonTaskStore(tmp_path / "tasks.json")
    store.upsert(Task(title="x"))

    def fail_replace(src: str, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("tomtimer.core.store.json_store.os.replace", fail_replace)

    with pytest.raises(StoreError, match="failed to commit"):
        store.commit()
    assert sorted(p.name for p in tmp_path.iterdir()) == []
