"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class TomTimerConfig(BaseModel):
    provider: str = "todoist"
    collection_id: str | None = None
    auth: str = "env"
    token: str | None = None
    base_url: str | None = None
    store_path: Path = Path("tasks.json")
    max_concurrent: int = Field(default=4, ge=1, le=10)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_auth_token(self) -> TomTimerConfig:
        token = (self.token or "").strip()
        if self.auth == "token":
            if not token:
                raise ValueError("token auth requires a non-empty token")
            return self
        if token:
            raise ValueError("token must be unset when auth is not 'token'")
        if self.auth not in {"env", "token"}:
            raise ValueError("auth must be one of: env, token")
        return self
