"""Command execution layer: executables, consoles, and their failures."""

from fileexplorer.console.base import CommandResult, ConsoleProvider, Executable
from fileexplorer.console.exceptions import (
    CommandNotFoundError,
    ConsoleAllocError,
    ConsoleError,
    ExecutionError,
    HandlerNotFoundError,
    InsufficientPermissionsError,
    InvalidCommandDefinitionError,
    NoSuchFileOrDirectoryError,
    OperationTimeoutError,
    ParseError,
    ReadOnlyFilesystemError,
    RelaunchableError,
    attach_follow_up,
    is_relaunchable,
)
from fileexplorer.console.shell import ShellCommand, ShellConsole

__all__ = [
    "CommandNotFoundError",
    "CommandResult",
    "ConsoleAllocError",
    "ConsoleError",
    "ConsoleProvider",
    "Executable",
    "ExecutionError",
    "HandlerNotFoundError",
    "InsufficientPermissionsError",
    "InvalidCommandDefinitionError",
    "NoSuchFileOrDirectoryError",
    "OperationTimeoutError",
    "ParseError",
    "ReadOnlyFilesystemError",
    "RelaunchableError",
    "ShellCommand",
    "ShellConsole",
    "attach_follow_up",
    "is_relaunchable",
]
