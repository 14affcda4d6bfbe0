"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

_DEFAULT_CONFIG = "./tomtimer.json"


def _package_version() -> str:
    try:
        return version("tomtimer")
    except PackageNotFoundError:
        return "0.0.0"


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a whole number of minutes, got {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("minutes must not be negative")
    return parsed


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=_DEFAULT_CONFIG, help="Path to tomtimer.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tomtimer")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Generate a tomtimer.json config file")
    init_parser.add_argument("--output", "-o", default="tomtimer.json", help="Output file path (default: tomtimer.json)")
    init_parser.add_argument("--defaults", action="store_true", help="Use defaults without prompting")
    init_parser.add_argument("--collection", default=None, help="Remote collection (project) id")

    sync_parser = subparsers.add_parser("sync", help="Two-way sync of local tasks with the remote collection")
    mode = sync_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--dry-run", action="store_true", help="Preview mode")
    mode.add_argument("--apply", action="store_true", help="Apply mode")
    sync_parser.add_argument(
        "--interactive",
        "-i",
        action="store_true",
        help="Ask how to resolve each conflict instead of leaving it for the next pass",
    )
    _add_common(sync_parser)

    tasks_parser = subparsers.add_parser("tasks", help="Manage local tasks")
    tasks_subparsers = tasks_parser.add_subparsers(dest="tasks_command", required=True)

    list_parser = tasks_subparsers.add_parser("list", help="List local tasks")
    _add_common(list_parser)

    add_parser = tasks_subparsers.add_parser("add", help="Add a local task")
    add_parser.add_argument("title", help="Task title")
    add_parser.add_argument(
        "--estimate",
        type=_non_negative_int,
        default=25,
        help="Estimated minutes (default: 25)",
    )
    _add_common(add_parser)

    delete_parser = tasks_subparsers.add_parser("delete", help="Delete a task locally and remotely")
    delete_parser.add_argument("task_id", help="Task id (or unique prefix)")
    _add_common(delete_parser)

    log_parser = tasks_subparsers.add_parser("log", help="Log worked minutes against a task")
    log_parser.add_argument("task_id", help="Task id (or unique prefix)")
    log_parser.add_argument("minutes", type=_non_negative_int, help="Minutes worked")
    _add_common(log_parser)

    collections_parser = subparsers.add_parser("collections", help="List remote collections")
    _add_common(collections_parser)

    return parser


__all__ = ["build_parser"]
