"""Exception hierarchy for command execution.

All console exceptions inherit from ConsoleError so callers can catch broad
(ConsoleError) or narrow (e.g., InsufficientPermissionsError). The hierarchy
is flat on purpose: classification matches concrete types exactly, so a
subclass never inherits its parent's failure kind.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from fileexplorer.core.errors.codes import MessageId

if TYPE_CHECKING:
    from fileexplorer.console.base import Executable

FollowUp = Callable[[Any], None]


class ConsoleError(Exception):
    """Base exception for all command-execution errors."""


class ConsoleAllocError(ConsoleError):
    """Raised when a console (shell session) cannot be created."""


class InvalidCommandDefinitionError(ConsoleError):
    """Raised when a command is malformed before it reaches the shell."""


class CommandNotFoundError(ConsoleError):
    """Raised when the command binary does not exist (exit status 127)."""


class NoSuchFileOrDirectoryError(ConsoleError):
    """Raised when a command reports a missing file or directory."""


class ReadOnlyFilesystemError(ConsoleError):
    """Raised when a write is attempted on a read-only mount."""


class OperationTimeoutError(ConsoleError):
    """Raised when a command does not finish within its timeout."""


class ExecutionError(ConsoleError):
    """Raised when a command exits non-zero for an unrecognised reason.

    Attributes:
        exit_code: The command's exit status, if it ran.
        stderr: Captured standard error output.
    """

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class ParseError(ConsoleError):
    """Raised when command output cannot be parsed."""


class HandlerNotFoundError(ConsoleError):
    """Raised when no application is registered to open a file."""


class RelaunchableError(ConsoleError):
    """A failure that can be resolved by re-running its commands.

    Carries the ordered executables to re-run, the confirmation question to
    ask the user, and an optional follow-up invoked with each re-execution's
    result. The execution layer creates it at the point of detection.
    """

    def __init__(
        self,
        message: str,
        executables: Sequence[Executable] = (),
        question_id: MessageId | str | None = MessageId.RELAUNCH_PRIVILEGED,
        follow_up: FollowUp | None = None,
    ) -> None:
        super().__init__(message)
        self.executables: list[Executable] = list(executables)
        self.question_id = question_id
        self.follow_up = follow_up
        self.consumed = False

    def add_executable(self, executable: Executable) -> None:
        """Append a command to re-run after the ones already attached."""
        self.executables.append(executable)


class InsufficientPermissionsError(RelaunchableError):
    """Raised when the current console lacks privileges for a command."""


def is_relaunchable(failure: BaseException) -> bool:
    """Whether a failure carries what a relaunch needs.

    Retryability is structural: any failure with a non-empty list of
    executables and a confirmation question qualifies.
    """
    executables = getattr(failure, "executables", None)
    question_id = getattr(failure, "question_id", None)
    return bool(executables) and bool(question_id)


def attach_follow_up(failure: BaseException, follow_up: FollowUp) -> None:
    """Attach a callback run with each re-execution result of a relaunch.

    Failures that cannot be relaunched are left untouched.
    """
    if isinstance(failure, RelaunchableError):
        failure.follow_up = follow_up
