"""Public API surface for tomtimer."""

__version__ = "0.3.0"

from tomtimer.core.auth import create_token_resolver
from tomtimer.core.config import load_config, scaffold_config, write_config
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
from tomtimer.core.contracts.record import Collection, RemoteRecord
from tomtimer.core.contracts.store import TaskStore
from tomtimer.core.contracts.sync import ConflictResolution, PushOutcome, SyncConflict, SyncResult
from tomtimer.core.contracts.task import Metadata, Task
from tomtimer.core.engine import ConflictDecider, SyncOrchestrator, SyncPhase, SyncProgress
from tomtimer.core.metadata import decode_metadata, encode_metadata
from tomtimer.core.providers import create_provider
from tomtimer.core.store import JsonTaskStore
from tomtimer.sdk import TomTimer

__all__ = [
    "AuthenticationError",
    "Collection",
    "ConfigError",
    "ConflictDecider",
    "ConflictResolution",
    "JsonTaskStore",
    "Metadata",
    "NoCollectionSelectedError",
    "Provider",
    "ProviderError",
    "PushOutcome",
    "RemoteItemNotFoundError",
    "RemoteRecord",
    "StoreError",
    "SyncConflict",
    "SyncError",
    "SyncOrchestrator",
    "SyncPhase",
    "SyncProgress",
    "SyncResult",
    "Task",
    "TaskNotFoundError",
    "TaskStore",
    "TomTimer",
    "TomTimerConfig",
    "TomTimerError",
    "create_provider",
    "create_token_resolver",
    "decode_metadata",
    "encode_metadata",
    "load_config",
    "scaffold_config",
    "write_config",
]
