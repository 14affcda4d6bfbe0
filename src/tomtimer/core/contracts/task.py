"""Local task contracts."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ESTIMATE_MINUTES = 25


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Metadata(BaseModel):
    """Sync fields carried inside a remote record's notes."""

    estimated_minutes: int = DEFAULT_ESTIMATE_MINUTES
    remaining_minutes: int = DEFAULT_ESTIMATE_MINUTES
    is_active: bool = False
    modified_at: datetime

    model_config = {"frozen": True}

    @field_validator("modified_at")
    @classmethod
    def _normalize_modified_at(cls, value: datetime) -> datetime:
        return _as_utc(value)


class Task(BaseModel):
    """A locally owned task.

    ``remaining_minutes`` defaults to ``estimated_minutes`` and is clamped into
    ``[0, estimated_minutes]``. Every helper that changes a synced field bumps
    ``modified_at``; :meth:`apply_metadata` instead adopts the remote timestamp.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    estimated_minutes: int = Field(default=DEFAULT_ESTIMATE_MINUTES, ge=0)
    remaining_minutes: int = Field(default=DEFAULT_ESTIMATE_MINUTES, ge=0)
    is_active: bool = False
    modified_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    remote_identifier: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_remaining(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("remaining_minutes") is None:
            data = dict(data)
            data["remaining_minutes"] = data.get("estimated_minutes", DEFAULT_ESTIMATE_MINUTES)
        return data

    @field_validator("modified_at", "created_at")
    @classmethod
    def _normalize_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _clamp_remaining(self) -> Task:
        if self.remaining_minutes > self.estimated_minutes:
            self.remaining_minutes = self.estimated_minutes
        return self

    @property
    def is_linked(self) -> bool:
        return self.remote_identifier is not None

    @property
    def is_complete(self) -> bool:
        return self.remaining_minutes == 0

    def touch(self, at: datetime | None = None) -> None:
        self.modified_at = _as_utc(at) if at is not None else utcnow()

    def rename(self, title: str) -> None:
        self.title = title
        self.touch()

    def set_active(self, active: bool) -> None:
        self.is_active = active
        self.touch()

    def apply_completion(self, minutes: int) -> None:
        """Subtract worked minutes from the remaining time."""
        delta = max(0, minutes)
        self.remaining_minutes = max(0, self.remaining_minutes - delta)
        self.touch()

    def update_estimates(self, estimated: int, remaining: int) -> None:
        new_estimated = max(0, estimated)
        self.estimated_minutes = new_estimated
        self.remaining_minutes = min(max(0, remaining), new_estimated)
        self.touch()

    def apply_metadata(self, title: str, metadata: Metadata) -> None:
        """Overwrite every synced field from a decoded remote copy."""
        self.title = title
        self.estimated_minutes = max(0, metadata.estimated_minutes)
        self.remaining_minutes = min(max(0, metadata.remaining_minutes), self.estimated_minutes)
        self.is_active = metadata.is_active
        self.modified_at = metadata.modified_at

    def metadata(self) -> Metadata:
        return Metadata(
            estimated_minutes=self.estimated_minutes,
            remaining_minutes=self.remaining_minutes,
            is_active=self.is_active,
            modified_at=self.modified_at,
        )
