"""Token resolver factory."""

from __future__ import annotations

from tomtimer.core.auth.base import TokenResolver
from tomtimer.core.auth.resolvers.env import EnvTokenResolver
from tomtimer.core.auth.resolvers.static import StaticTokenResolver
from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import ConfigError

AUTH_MODES = ("env", "token")


def create_token_resolver(config: TomTimerConfig) -> TokenResolver:
    if config.auth == "env":
        return EnvTokenResolver()
    if config.auth == "token":
        return StaticTokenResolver(token=config.token or "")
    raise ConfigError(f"Unknown auth mode: {config.auth}")
