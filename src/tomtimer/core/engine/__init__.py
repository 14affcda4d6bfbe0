"""Core engine-domain exports."""

from .linker import IdentityLinker
from .orchestrator import ConflictDecider, SyncOrchestrator
from .progress import NullSyncProgress, SyncPhase, SyncProgress
from .reconciler import Reconciler
from .resolver import resolve_conflict

__all__ = [
    "ConflictDecider",
    "IdentityLinker",
    "NullSyncProgress",
    "Reconciler",
    "SyncPhase",
    "SyncOrchestrator",
    "SyncProgress",
    "resolve_conflict",
]
