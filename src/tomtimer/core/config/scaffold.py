"""Config scaffolding for ``tomtimer init``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import ConfigError

_STORE_PATH_DEFAULT = "tasks.json"


def scaffold_config(
    *,
    collection_id: str | None = None,
    provider: str = "todoist",
    auth: str = "env",
    token: str | None = None,
    store_path: str = _STORE_PATH_DEFAULT,
    max_concurrent: int = 4,
    base_url: str | None = None,
    include_defaults: bool = False,
) -> dict[str, Any]:
    """Build a minimal config payload, omitting values equal to their defaults."""
    raw: dict[str, Any] = {"provider": provider}
    if collection_id is not None:
        raw["collection_id"] = collection_id
    if include_defaults or auth != "env":
        raw["auth"] = auth
    if token is not None:
        raw["token"] = token
    if include_defaults or store_path != _STORE_PATH_DEFAULT:
        raw["store_path"] = store_path
    if include_defaults or max_concurrent != 4:
        raw["max_concurrent"] = max_concurrent
    if base_url is not None:
        raw["base_url"] = base_url

    try:
        TomTimerConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc
    return raw


def write_config(config: dict[str, Any], path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed writing config file: {path}") from exc
