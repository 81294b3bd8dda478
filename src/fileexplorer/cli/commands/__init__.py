# fileexplorer/cli/commands: Command modules for the fileexplorer CLI.
#
# Each module in this package provides one or more CLI commands.

from .mounts import info, mounts, remount_cmd
from .run import run

__all__ = [
    # mounts.py
    "info",
    "mounts",
    "remount_cmd",
    # run.py
    "run",
]
