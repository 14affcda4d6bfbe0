"""Factory for creating provider instances by name.

The CLI and SDK select providers through this registry and never import a
concrete provider directly.
"""

from __future__ import annotations

from tomtimer.core.contracts.provider import Provider
from tomtimer.core.providers.todoist import TodoistProvider

_REGISTRY: dict[str, type[Provider]] = {
    "todoist": TodoistProvider,
}


def register(name: str, provider_cls: type[Provider]) -> None:
    """Register a provider class by name."""
    _REGISTRY[name] = provider_cls


def available_providers() -> list[str]:
    return sorted(_REGISTRY)


def create_provider(name: str, *, token: str, base_url: str | None = None, **kwargs: object) -> Provider:
    """Create a provider instance by name.

    The returned provider is an async context manager::

        async with create_provider("todoist", token=token) as provider:
            records = await provider.fetch_records(collection_id)

    Raises:
        ValueError: If the provider name is not registered.
    """
    if name not in _REGISTRY:
        available = ", ".join(available_providers()) or "(none registered)"
        raise ValueError(f"Unknown provider: {name!r}. Available: {available}")

    provider_cls = _REGISTRY[name]
    return provider_cls(token=token, base_url=base_url, **kwargs)  # type: ignore[call-arg]
