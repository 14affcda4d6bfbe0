"""Concrete token resolvers."""

from tomtimer.core.auth.resolvers.env import DEFAULT_TOKEN_VARIABLE, EnvTokenResolver
from tomtimer.core.auth.resolvers.static import StaticTokenResolver

__all__ = ["DEFAULT_TOKEN_VARIABLE", "EnvTokenResolver", "StaticTokenResolver"]
