"""Core auth exports."""

from tomtimer.core.auth.base import TokenResolver
from tomtimer.core.auth.factory import AUTH_MODES, create_token_resolver
from tomtimer.core.auth.resolvers import EnvTokenResolver, StaticTokenResolver

__all__ = ["AUTH_MODES", "EnvTokenResolver", "StaticTokenResolver", "TokenResolver", "create_token_resolver"]
