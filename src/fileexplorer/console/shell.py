"""Shell-backed console and command executable.

ShellConsole runs argv lists with ``subprocess.run`` (never through a
shell). Once elevated it prefixes every command with a non-interactive
privilege wrapper, ``sudo -n`` by default. ShellCommand wraps one argv and
translates how it failed into the console exception hierarchy, attaching
itself to InsufficientPermissionsError so the command can be relaunched.
"""

from __future__ import annotations

import os
import re
import subprocess
import time
from collections.abc import Callable, Sequence
from typing import Any

from fileexplorer.console.base import CommandResult
from fileexplorer.console.exceptions import (
    CommandNotFoundError,
    ConsoleAllocError,
    ExecutionError,
    InsufficientPermissionsError,
    InvalidCommandDefinitionError,
    NoSuchFileOrDirectoryError,
    OperationTimeoutError,
    ParseError,
    ReadOnlyFilesystemError,
)
from fileexplorer.core.config import ConsoleConfig
from fileexplorer.core.errors.codes import MessageId
from fileexplorer.core.logging import get_logger

_logger = get_logger("console")

# Exit statuses reserved by POSIX shells
EXIT_NOT_EXECUTABLE = 126
EXIT_COMMAND_NOT_FOUND = 127

_PERMISSION_PATTERNS: list[str] = [
    r"permission denied",
    r"operation not permitted",
    r"must be superuser",
    r"only root can",
    r"are you root\?",
    r"a password is required",  # sudo -n without cached credentials
]

_READ_ONLY_PATTERNS: list[str] = [
    r"read-only file ?system",
    r"\bEROFS\b",
]

_NOT_FOUND_PATTERNS: list[str] = [
    r"no such file or directory",
    r"\bENOENT\b",
    r"does not exist",
]


def _compile(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class ShellConsole:
    """Console provider running commands as subprocesses.

    The console is privileged when the process runs as root or after a
    successful ``elevate()``. The privileged state is only changed by
    ``elevate()`` and ``drop_privileges()``.
    """

    def __init__(self, config: ConsoleConfig | None = None) -> None:
        self.config = config or ConsoleConfig()
        self._elevated = False

    @staticmethod
    def _is_root() -> bool:
        geteuid = getattr(os, "geteuid", None)
        return geteuid is not None and geteuid() == 0

    def is_privileged(self) -> bool:
        return self._is_root() or self._elevated

    def elevate(self) -> bool:
        """Run the elevation command; success leaves the console privileged."""
        if self.is_privileged():
            return True
        argv = list(self.config.elevate_command)
        _logger.info("console.elevate_started", argv=argv)
        try:
            result = subprocess.run(
                argv,
                timeout=self.config.elevate_timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            _logger.warning("console.elevate_unavailable", binary=argv[0])
            return False
        except subprocess.TimeoutExpired:
            _logger.warning("console.elevate_timeout", argv=argv)
            return False
        except OSError as e:
            _logger.warning("console.elevate_failed", argv=argv, error=str(e))
            return False

        self._elevated = result.returncode == 0
        _logger.info(
            "console.elevate_finished",
            exit_code=result.returncode,
            privileged=self._elevated,
        )
        return self._elevated

    def drop_privileges(self) -> None:
        """Go back to running commands unprivileged (no effect for root)."""
        self._elevated = False

    def build_argv(self, argv: Sequence[str]) -> list[str]:
        """The argv actually executed for a command in the current context."""
        if self._elevated and not self._is_root():
            return [*self.config.privileged_prefix, *argv]
        return list(argv)

    def run(self, argv: Sequence[str], timeout: float | None = None) -> CommandResult:
        """Run a command and capture its output.

        Raises:
            FileNotFoundError: The binary does not exist.
            subprocess.TimeoutExpired: The command exceeded its timeout.
            OSError: The process could not be spawned.
        """
        full_argv = self.build_argv(argv)
        started = time.monotonic()
        completed = subprocess.run(
            full_argv,
            capture_output=True,
            text=True,
            timeout=timeout or self.config.command_timeout_seconds,
            check=False,
        )
        return CommandResult(
            argv=full_argv,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_seconds=time.monotonic() - started,
        )


class ShellCommand:
    """Executable that runs one argv through a ShellConsole.

    The console is looked up at execution time, so re-executing after an
    elevation runs the command with the privileged prefix.

    Example:
        command = ShellCommand(["mount", "-o", "remount,rw", "/data"], console)
        try:
            command.execute()
        except ConsoleError as e:
            handler.handle(e)
    """

    _permission_patterns = _compile(_PERMISSION_PATTERNS)
    _read_only_patterns = _compile(_READ_ONLY_PATTERNS)
    _not_found_patterns = _compile(_NOT_FOUND_PATTERNS)

    def __init__(
        self,
        argv: Sequence[str],
        console: ShellConsole,
        parser: Callable[[str], Any] | None = None,
        timeout: float | None = None,
    ) -> None:
        if not argv or not all(isinstance(part, str) and part for part in argv):
            raise InvalidCommandDefinitionError(f"Invalid command: {list(argv)!r}")
        self.argv = list(argv)
        self.console = console
        self.parser = parser
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"ShellCommand({' '.join(self.argv)!r})"

    def execute(self) -> Any:
        """Run the command; return parsed output, or stdout without a parser."""
        log = _logger.bind(command=self.argv[0])
        try:
            result = self.console.run(self.argv, timeout=self.timeout)
        except FileNotFoundError as e:
            log.debug("console.command_missing")
            raise CommandNotFoundError(f"{self.argv[0]}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise OperationTimeoutError(
                f"{self.argv[0]} timed out after {e.timeout:.0f}s"
            ) from e
        except OSError as e:
            raise ConsoleAllocError(f"Cannot start {self.argv[0]}: {e}") from e

        log.debug(
            "console.command_finished",
            argv=result.argv,
            exit_code=result.exit_code,
            duration_seconds=round(result.duration_seconds, 3),
        )
        if not result.success:
            raise self._translate_failure(result)

        if self.parser is None:
            return result.stdout
        try:
            return self.parser(result.stdout)
        except ValueError as e:
            raise ParseError(f"Cannot parse output of {self.argv[0]}: {e}") from e

    def _translate_failure(self, result: CommandResult) -> Exception:
        """Map a non-zero exit to the most specific console exception."""
        stderr = result.stderr.strip()
        detail = stderr or f"exit status {result.exit_code}"

        if result.exit_code == EXIT_COMMAND_NOT_FOUND:
            return CommandNotFoundError(f"{self.argv[0]}: {detail}")
        if result.exit_code == EXIT_NOT_EXECUTABLE or self._matches(
            self._permission_patterns, stderr
        ):
            return InsufficientPermissionsError(
                f"{self.argv[0]}: {detail}",
                executables=[self],
                question_id=MessageId.RELAUNCH_PRIVILEGED,
            )
        if self._matches(self._read_only_patterns, stderr):
            return ReadOnlyFilesystemError(f"{self.argv[0]}: {detail}")
        if self._matches(self._not_found_patterns, stderr):
            return NoSuchFileOrDirectoryError(f"{self.argv[0]}: {detail}")
        return ExecutionError(
            f"{self.argv[0]} failed: {detail}",
            exit_code=result.exit_code,
            stderr=stderr,
        )

    @staticmethod
    def _matches(patterns: list[re.Pattern[str]], text: str) -> bool:
        return any(p.search(text) for p in patterns)
