"""Config loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path("tomtimer.json")


def load_config(path: str | Path) -> TomTimerConfig:
    """Read and validate a JSON config file.

    ``store_path`` is resolved against the directory holding the config file.
    """
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = TomTimerConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    store_path = parsed.store_path.expanduser()
    if not store_path.is_absolute():
        store_path = (config_path.parent / store_path).resolve()
    return parsed.model_copy(update={"store_path": store_path})
