"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from tomtimer import (
    AuthenticationError,
    ConfigError,
    ProviderError,
    StoreError,
    SyncError,
    TaskNotFoundError,
)


def main(argv: list[str] | None = None) -> int:
    import tomtimer.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cli._run_init(args)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "sync":
            cli.asyncio.run(cli._run_sync(args))
        elif args.command == "tasks":
            cli.asyncio.run(cli._run_tasks(args))
        elif args.command == "collections":
            cli.asyncio.run(cli._run_collections(args))
        return 0
    except TaskNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (ConfigError, StoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (AuthenticationError, ProviderError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except SyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
