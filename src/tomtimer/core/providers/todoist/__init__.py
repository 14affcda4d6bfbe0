"""Todoist provider package."""

from tomtimer.core.providers.todoist.provider import DEFAULT_BASE_URL, TodoistProvider

__all__ = ["DEFAULT_BASE_URL", "TodoistProvider"]
