"""Local task store implementations."""

from tomtimer.core.store.json_store import JsonTaskStore, TaskDocument

__all__ = ["JsonTaskStore", "TaskDocument"]
