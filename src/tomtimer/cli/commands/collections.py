"""Remote collection listing."""

from __future__ import annotations

import argparse

from tomtimer.core.contracts.record import Collection


def format_collections(collections: list[Collection], selected: str | None) -> str:
    if not collections:
        return "No collections found."
    return "\n".join(
        f"{'*' if collection.id == selected else ' '} {collection.id}  {collection.name}" for collection in collections
    )


async def run_collections(args: argparse.Namespace) -> None:
    import tomtimer.cli as cli

    config = cli.load_config(args.config)
    timer = await cli.TomTimer.from_config(config)
    print(format_collections(await timer.list_collections(), config.collection_id))


__all__ = ["format_collections", "run_collections"]
