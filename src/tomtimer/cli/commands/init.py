"""Init command handlers."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import questionary

from tomtimer.core.auth import create_token_resolver
from tomtimer.core.auth.resolvers.env import DEFAULT_TOKEN_VARIABLE
from tomtimer.core.contracts.config import TomTimerConfig
from tomtimer.core.contracts.exceptions import ProviderError
from tomtimer.core.contracts.record import Collection
from tomtimer.core.providers import available_providers, create_provider


def run_init(args: argparse.Namespace) -> int:
    """Run the init wizard or defaults mode."""
    output = Path(args.output)

    if output.exists():
        if args.defaults:
            print(f"error: {output} already exists (use a different --output path)", file=sys.stderr)
            return 2
        try:
            if not questionary.confirm(f"{output} already exists. Overwrite?", default=False).ask():
                print("Aborted.")
                return 2
        except KeyboardInterrupt:
            print("\nAborted.")
            return 2

    if args.defaults:
        return run_init_defaults(output, collection_id=args.collection)
    return run_init_interactive(output, collection_id=args.collection)


def run_init_defaults(output: Path, *, collection_id: str | None = None) -> int:
    """Write a config with defaults, no prompts."""
    import tomtimer.cli as cli

    try:
        config = cli.scaffold_config(collection_id=collection_id, include_defaults=True)
        cli.write_config(config, output)
    except cli.ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3

    print(f"Config written to {output}")
    if collection_id is None:
        print("\nSet collection_id to a Todoist project id (see 'tomtimer collections'), then run:")
    else:
        print(f"\nExport {DEFAULT_TOKEN_VARIABLE}, then run:")
    print(f"  tomtimer sync --config {output} --dry-run")
    return 0


async def fetch_collections(*, provider_name: str, auth: str, token: str | None) -> list[Collection]:
    config = TomTimerConfig(provider=provider_name, auth=auth, token=token)
    resolved = await create_token_resolver(config).resolve()
    async with create_provider(provider_name, token=resolved) as provider:
        await provider.authenticate()
        return await provider.list_collections()


def _ask(question: questionary.Question) -> str:
    answer = question.ask()
    if answer is None:
        raise KeyboardInterrupt
    return answer


def run_init_interactive(output: Path, *, collection_id: str | None = None) -> int:
    """Run the interactive wizard using questionary."""
    import tomtimer.cli as cli

    try:
        provider_name = _ask(questionary.select("Provider:", choices=available_providers(), default="todoist"))
        auth = _ask(
            questionary.select(
                "Authentication strategy:",
                choices=[
                    questionary.Choice(f"Environment variable ({DEFAULT_TOKEN_VARIABLE})", value="env"),
                    questionary.Choice("Token stored in the config file", value="token"),
                ],
                default="env",
            )
        )
        token: str | None = None
        if auth == "token":
            token = _ask(
                questionary.password(
                    "API token:",
                    validate=lambda v: len(v.strip()) > 0 or "Token is required for static token auth",
                )
            ).strip()

        if collection_id is None:
            collection_id = _choose_collection(provider_name=provider_name, auth=auth, token=token)

        store_path = _ask(questionary.text("Local task store:", default="tasks.json")).strip()

        config = cli.scaffold_config(
            provider=provider_name,
            collection_id=collection_id,
            auth=auth,
            token=token,
            store_path=store_path or "tasks.json",
        )
        cli.write_config(config, output)
    except KeyboardInterrupt:
        print("\nAborted.")
        return 2
    except cli.ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3

    print(f"\nConfig written to {output}")
    print(f"  tomtimer sync --config {output} --dry-run")
    return 0


def _choose_collection(*, provider_name: str, auth: str, token: str | None) -> str | None:
    try:
        collections = asyncio.run(fetch_collections(provider_name=provider_name, auth=auth, token=token))
    except ProviderError as exc:
        print(f"warning: could not list collections ({exc}); enter the id manually", file=sys.stderr)
        collections = []

    if collections:
        return _ask(
            questionary.select(
                "Collection to sync:",
                choices=[questionary.Choice(f"{c.name} ({c.id})", value=c.id) for c in collections],
            )
        )
    answer = _ask(questionary.text("Collection id (leave empty to set later):")).strip()
    return answer or None


__all__ = ["fetch_collections", "run_init", "run_init_defaults", "run_init_interactive"]
