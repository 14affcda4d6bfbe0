"""Metadata codec for remote notes fields.

The remote store has no notion of estimates or an active flag, so these
travel inside the record's free-text notes. Three generations exist in
remote data and all of them stay decodable.

Generation 1 (legacy, no timestamp)::

    TicketyPom Task
    Estimated Total Time: 30 minutes
    Remaining Time: 12 minutes
    Active: true

Generation 2 (one JSON object after the header)::

    TICKETYPOM_META
    {"estimatedMinutes": 30, "remainingMinutes": 12, "isActive": true, "modifiedAt": "..."}

Generation 3 (current, the only one written)::

    TICKETYPOM_META
    estimatedMinutes:30
    remainingMinutes:12
    modifiedAt:2025-03-21T10:15:30.123Z
    isActive:true

Timestamps are written in UTC with millisecond resolution; finer precision is
truncated, so ``decode(encode(m)) == m`` only for millisecond-aligned values.
Decoding never raises: a missing header yields defaults, and a field that
cannot be parsed falls back to its own default without affecting the others.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from tomtimer.core.contracts.task import DEFAULT_ESTIMATE_MINUTES, Metadata, Task

logger = logging.getLogger(__name__)

METADATA_HEADER = "TICKETYPOM_META"
LEGACY_HEADER = "TicketyPom Task"

_HEADER_RE = re.compile(rf"^{METADATA_HEADER}(?=$|\s|\{{)(.*)$")
_DIGITS = re.compile(r"\d+")
_TRUE_VALUES = frozenset({"true", "yes", "1"})
_LEGACY_KEYS = {
    "Estimated Total Time": "estimatedMinutes",
    "Remaining Time": "remainingMinutes",
    "Active": "isActive",
}
# Numeric dates in JSON payloads count seconds from Foundation's reference date.
_REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=UTC)


class MetadataFormat(StrEnum):
    NONE = "none"
    LEGACY = "legacy"
    JSON = "json"
    CURRENT = "current"


def format_timestamp(value: datetime) -> str:
    value = value.astimezone(UTC) if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def truncate_timestamp(value: datetime) -> datetime:
    """Drop sub-millisecond precision the way encoding does."""
    value = value.astimezone(UTC) if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def encode_metadata(source: Task | Metadata) -> str:
    metadata = source.metadata() if isinstance(source, Task) else source
    return "\n".join(
        [
            METADATA_HEADER,
            f"estimatedMinutes:{metadata.estimated_minutes}",
            f"remainingMinutes:{metadata.remaining_minutes}",
            f"modifiedAt:{format_timestamp(metadata.modified_at)}",
            f"isActive:{'true' if metadata.is_active else 'false'}",
        ]
    )


def detect_format(notes: str | None) -> MetadataFormat:
    metadata_format, _ = _locate(notes)
    return metadata_format


def decode_metadata(notes: str | None, *, fallback_modified_at: datetime) -> Metadata:
    metadata_format, body = _locate(notes)
    if metadata_format == MetadataFormat.NONE:
        if notes:
            logger.debug("No metadata header in notes; using defaults")
        return Metadata(modified_at=fallback_modified_at)

    if metadata_format == MetadataFormat.JSON:
        fields = _json_fields(body)
    elif metadata_format == MetadataFormat.LEGACY:
        fields = _line_fields(body, key_map=_LEGACY_KEYS)
    else:
        fields = _line_fields(body)

    return Metadata(
        estimated_minutes=_parse_minutes(fields.get("estimatedMinutes")),
        remaining_minutes=_parse_minutes(fields.get("remainingMinutes")),
        is_active=_parse_bool(fields.get("isActive")),
        modified_at=_parse_timestamp(fields.get("modifiedAt"), fallback_modified_at),
    )


def _locate(notes: str | None) -> tuple[MetadataFormat, list[str]]:
    if not notes:
        return MetadataFormat.NONE, []
    lines = notes.splitlines()
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped == LEGACY_HEADER:
            return MetadataFormat.LEGACY, lines[index + 1 :]
        match = _HEADER_RE.match(stripped)
        if match is None:
            continue
        rest = match.group(1).strip()
        body = ([rest] if rest else []) + lines[index + 1 :]
        first = next((candidate.strip() for candidate in body if candidate.strip()), "")
        if first.startswith("{"):
            return MetadataFormat.JSON, body
        return MetadataFormat.CURRENT, body
    return MetadataFormat.NONE, []


def _line_fields(body: list[str], *, key_map: dict[str, str] | None = None) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for line in body:
        stripped = line.strip()
        if not stripped:
            if fields:
                break
            continue
        if ":" not in stripped:
            continue
        key, value = stripped.split(":", 1)
        key = key.strip()
        if key_map is not None:
            mapped = key_map.get(key)
            if mapped is None:
                continue
            key = mapped
        if key:
            fields.setdefault(key, value.strip())
    return fields


def _json_fields(body: list[str]) -> dict[str, Any]:
    payload = "\n".join(body).strip()
    try:
        parsed, _ = json.JSONDecoder().raw_decode(payload)
    except ValueError:
        logger.debug("Unparseable JSON metadata payload; using defaults")
        return {}
    if not isinstance(parsed, dict):
        return {}
    return parsed


def _parse_minutes(value: Any, default: int = DEFAULT_ESTIMATE_MINUTES) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value >= 0 else default
    match = _DIGITS.search(str(value))
    if match is None:
        return default
    try:
        return int(match.group())
    except ValueError:
        return default


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return False


def _parse_timestamp(value: Any, fallback: datetime) -> datetime:
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return fallback
        try:
            return parsed.astimezone(UTC) if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
        except (OverflowError, ValueError):
            return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return _REFERENCE_DATE + timedelta(seconds=value)
        except (OverflowError, ValueError):
            return fallback
    return fallback
