"""Shared CLI formatting helpers."""

from __future__ import annotations

from tomtimer.core.contracts.task import Task


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def short_id(task_id: str) -> str:
    return task_id[:8]


def format_minutes(task: Task) -> str:
    return f"{task.remaining_minutes}/{task.estimated_minutes} min"


def resolve_task_id(prefix: str, tasks: list[Task]) -> str:
    """Expand a unique id prefix; unknown or ambiguous prefixes come back unchanged."""
    matches = [task.id for task in tasks if task.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else prefix
