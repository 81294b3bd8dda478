"""Protocols for the execution layer.

The relaunch machinery only needs two capabilities from the outside world:
something that can be executed again (Executable) and something that knows
whether commands currently run with privileges and can try to obtain them
(ConsoleProvider).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Executable(Protocol):
    """A unit of work that can be executed and re-executed.

    ``execute()`` returns a result or raises the failure it detected.
    """

    def execute(self) -> Any:
        ...


@runtime_checkable
class ConsoleProvider(Protocol):
    """Supplies the current execution context and can try to elevate it."""

    def is_privileged(self) -> bool:
        """Whether commands currently run with elevated privileges."""
        ...

    def elevate(self) -> bool:
        """Try to switch to a privileged context.

        Returns:
            True if the context is privileged afterwards. Failing to elevate
            (denied prompt, no elevation mechanism) returns False.
        """
        ...


@dataclass
class CommandResult:
    """Outcome of running a command through a console."""

    argv: list[str]
    """The argv that was actually executed, including any privilege prefix."""

    exit_code: int
    stdout: str
    stderr: str
    duration_seconds: float

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return f"{self.stdout}\n{self.stderr}".strip()
