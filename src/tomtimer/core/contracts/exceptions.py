"""Exception hierarchy for tomtimer."""

from __future__ import annotations


class TomTimerError(Exception):
    """Base exception for all tomtimer errors."""


class ConfigError(TomTimerError):
    """Configuration loading or validation failure."""


class StoreError(TomTimerError):
    """Local task store could not be read or committed."""


class ProviderError(TomTimerError):
    """Base remote provider operation failure."""


class RemoteItemNotFoundError(ProviderError):
    """The remote record behind an identifier no longer exists."""

    def __init__(self, message: str, *, remote_identifier: str) -> None:
        super().__init__(message)
        self.remote_identifier = remote_identifier


class AuthenticationError(ProviderError):
    """Authentication/authorization failure."""


class SyncError(TomTimerError):
    """Engine-level synchronization failure."""


class NoCollectionSelectedError(SyncError):
    """A sync pass was requested without a target remote collection."""


class TaskNotFoundError(TomTimerError):
    """No local task has the requested id."""
