"""Core providers-domain exports."""

from tomtimer.core.providers.dry_run import DryRunOperation, DryRunProvider
from tomtimer.core.providers.factory import available_providers, create_provider, register
from tomtimer.core.providers.todoist import TodoistProvider

__all__ = [
    "DryRunOperation",
    "DryRunProvider",
    "TodoistProvider",
    "available_providers",
    "create_provider",
    "register",
]
