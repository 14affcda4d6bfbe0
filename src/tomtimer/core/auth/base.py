"""Token resolver interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenResolver(ABC):
    """Produces the API token a provider authenticates with."""

    @abstractmethod
    async def resolve(self) -> str:
        """Return a non-empty token.

        Raises:
            AuthenticationError: If no usable token is available.
        """
