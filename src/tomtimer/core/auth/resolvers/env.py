"""Environment variable token resolver."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tomtimer.core.auth.base import TokenResolver
from tomtimer.core.contracts.exceptions import AuthenticationError

DEFAULT_TOKEN_VARIABLE = "TODOIST_API_TOKEN"


@dataclass(frozen=True)
class EnvTokenResolver(TokenResolver):
    variable: str = DEFAULT_TOKEN_VARIABLE

    async def resolve(self) -> str:
        token = (os.getenv(self.variable) or "").strip()
        if not token:
            raise AuthenticationError(f"{self.variable} is not set or empty")
        return token
