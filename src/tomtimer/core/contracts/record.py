"""Provider-agnostic remote record contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RemoteRecord(BaseModel):
    """A record fetched from the remote task store.

    ``notes`` is the remote free-text field that carries encoded metadata.
    """

    remote_identifier: str
    title: str = ""
    notes: str | None = None
    completed: bool = False
    last_modified: datetime | None = None

    model_config = {"frozen": True}


class Collection(BaseModel):
    """A remote list/project that records live in."""

    id: str
    name: str


class CreateRecordInput(BaseModel):
    title: str
    notes: str
    completed: bool = False


class UpdateRecordInput(BaseModel):
    title: str
    notes: str
    completed: bool = False
