"""Command-line interface for tomtimer."""

from __future__ import annotations

import asyncio
import logging as logging

from tomtimer import ConfigError as ConfigError
from tomtimer import TomTimer as TomTimer
from tomtimer import load_config as load_config
from tomtimer import scaffold_config as scaffold_config
from tomtimer import write_config as write_config
from tomtimer.cli.app import main as main
from tomtimer.cli.commands import collections as collections_command
from tomtimer.cli.commands import init as init_command
from tomtimer.cli.commands import sync as sync_command
from tomtimer.cli.commands import tasks as tasks_command
from tomtimer.cli.parser import build_parser as build_parser

_format_summary = sync_command.format_sync_summary

_run_init = init_command.run_init
_run_sync = sync_command.run_sync
_run_tasks = tasks_command.run_tasks
_run_collections = collections_command.run_collections

__all__ = ["asyncio", "build_parser", "main"]
