"""Local task commands."""

from __future__ import annotations

import argparse

from tomtimer.cli.common import format_minutes, resolve_task_id, short_id
from tomtimer.core.contracts.task import Task


def format_task_table(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks."
    lines = []
    for task in tasks:
        status = "done" if task.is_complete else ("active" if task.is_active else "")
        link = "linked" if task.is_linked else "local"
        lines.append(f"{short_id(task.id)}  {format_minutes(task):>13}  {link:<6}  {status:<6}  {task.title}")
    return "\n".join(lines)


async def run_tasks(args: argparse.Namespace) -> None:
    import tomtimer.cli as cli

    config = cli.load_config(args.config)
    timer = await cli.TomTimer.from_config(config)

    if args.tasks_command == "list":
        print(format_task_table(timer.list_tasks()))
        return
    if args.tasks_command == "add":
        task = timer.add_task(args.title, args.estimate)
        print(f"Added {short_id(task.id)}  {task.title} ({task.estimated_minutes} min)")
        return

    task_id = resolve_task_id(args.task_id, timer.list_tasks())
    if args.tasks_command == "log":
        task = timer.log_minutes(task_id, args.minutes)
        print(f"Logged {args.minutes} min on {task.title}; {format_minutes(task)} remaining")
    elif args.tasks_command == "delete":
        task = await timer.delete_task(task_id)
        print(f"Deleted {task.title}")


__all__ = ["format_task_table", "run_tasks"]
