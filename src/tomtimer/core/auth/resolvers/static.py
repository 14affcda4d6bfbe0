"""Token taken verbatim from the config file."""

from __future__ import annotations

from dataclasses import dataclass, field

from tomtimer.core.auth.base import TokenResolver
from tomtimer.core.contracts.exceptions import AuthenticationError


@dataclass(frozen=True)
class StaticTokenResolver(TokenResolver):
    token: str = field(repr=False)

    async def resolve(self) -> str:
        if not self.token.strip():
            raise AuthenticationError("Configured token is empty")
        return self.token.strip()
