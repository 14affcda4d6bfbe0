"""Core contracts-domain exports."""

from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    NoCollectionSelectedError,
    ProviderError,
    RemoteItemNotFoundError,
    StoreError,
    SyncError,
    TaskNotFoundError,
    TomTimerError,
)
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import Collection, CreateRecordInput, RemoteRecord, UpdateRecordInput
from tomtimer.core.contracts.store import TaskStore
from tomtimer.core.contracts.sync import (
    ConflictResolution,
    PushFailure,
    PushOutcome,
    ReconcileResult,
    SyncConflict,
    SyncResult,
)
from tomtimer.core.contracts.task import DEFAULT_ESTIMATE_MINUTES, Metadata, Task

__all__ = [
    "DEFAULT_ESTIMATE_MINUTES",
    "AuthenticationError",
    "Collection",
    "ConfigError",
    "ConflictResolution",
    "CreateRecordInput",
    "Metadata",
    "NoCollectionSelectedError",
    "Provider",
    "ProviderError",
    "PushFailure",
    "PushOutcome",
    "ReconcileResult",
    "RemoteItemNotFoundError",
    "RemoteRecord",
    "StoreError",
    "SyncConflict",
    "SyncError",
    "SyncResult",
    "Task",
    "TaskNotFoundError",
    "TaskStore",
    "TomTimerConfig",
    "TomTimerError",
    "UpdateRecordInput",
]
