"""CLI progress displays."""

from tomtimer.cli.progress.rich import RichSyncProgress

__all__ = ["RichSyncProgress"]
