"""Shared utilities for fileexplorer CLI commands.

- Module-level CLI state (config path, logging options) set by the global
  option callbacks
- Config loading and logging setup
- Runtime assembly: console, UI executor, presenter, and failure handler
- A listener recording relaunch outcomes and mapping them to exit codes
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from fileexplorer.console.shell import ShellConsole
from fileexplorer.core.config import ConfigError, ExplorerConfig, load_config
from fileexplorer.core.logging import configure_logging, get_logger
from fileexplorer.relaunch.handler import FailureHandler
from fileexplorer.relaunch.listener import RelaunchOutcome
from fileexplorer.ui.executor import UiExecutor
from fileexplorer.ui.presenter import ConsolePresenter

_logger = get_logger("cli")

# Exit codes
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 2


class LogFormatOption(str, Enum):
    """Values accepted by --log-format."""

    JSON = "json"
    CONSOLE = "console"
    BOTH = "both"


@dataclass
class CliState:
    """Options collected by the global callbacks."""

    config_path: Path | None = None
    log_level: str | None = None
    log_file: Path | None = None
    log_format: str | None = None
    config: ExplorerConfig | None = None
    logging_configured: bool = False


_state = CliState()


def get_state() -> CliState:
    return _state


def reset_state() -> None:
    """Forget all CLI options (used between test invocations)."""
    global _state
    _state = CliState()


def get_config(console: Console) -> ExplorerConfig:
    """Load the configuration once per invocation.

    Raises:
        typer.Exit: If the configuration file is invalid.
    """
    if _state.config is None:
        try:
            _state.config = load_config(_state.config_path)
        except ConfigError as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            raise typer.Exit(EXIT_CANCELLED) from None
    return _state.config


def configure_global_logging(console: Console) -> None:
    """Configure logging from the config file, overridden by CLI options.

    Only configures once per invocation.

    Raises:
        typer.Exit: If logging configuration fails.
    """
    if _state.logging_configured:
        return

    log_config = get_config(console).logging
    try:
        configure_logging(
            level=(_state.log_level or log_config.level).upper(),  # type: ignore[arg-type]
            format=_state.log_format or log_config.format,  # type: ignore[arg-type]
            file_path=_state.log_file or log_config.file_path,
        )
    except (ValueError, AttributeError) as e:
        console.print(f"[red]Logging configuration error:[/red] {e}")
        raise typer.Exit(EXIT_CANCELLED) from None
    _state.logging_configured = True


@dataclass
class OutcomeRecorder:
    """Relaunch listener that remembers every outcome it receives."""

    outcomes: list[RelaunchOutcome] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _record(self, outcome: RelaunchOutcome) -> None:
        with self._lock:
            self.outcomes.append(outcome)
        _logger.debug("cli.relaunch_outcome", outcome=outcome.value)

    def on_success(self) -> None:
        self._record(RelaunchOutcome.SUCCESS)

    def on_cancelled(self) -> None:
        self._record(RelaunchOutcome.CANCELLED)

    def on_failed(self) -> None:
        self._record(RelaunchOutcome.FAILED)

    def on_abandoned(self) -> None:
        self._record(RelaunchOutcome.ABANDONED)

    @property
    def final(self) -> RelaunchOutcome | None:
        with self._lock:
            return self.outcomes[-1] if self.outcomes else None

    def exit_code(self) -> int:
        """Exit code for a command whose first attempt failed."""
        final = self.final
        if final == RelaunchOutcome.SUCCESS:
            return EXIT_OK
        if final == RelaunchOutcome.CANCELLED:
            return EXIT_CANCELLED
        return EXIT_FAILED


@dataclass
class Runtime:
    """Everything a command needs to run commands and handle their failures."""

    config: ExplorerConfig
    console: ShellConsole
    ui: UiExecutor
    presenter: ConsolePresenter
    handler: FailureHandler


@contextmanager
def open_runtime(output: Console, assume_yes: bool = False) -> Iterator[Runtime]:
    """Assemble a Runtime; on exit wait for pending UI work, then tear down.

    Args:
        output: Console user-facing messages are printed to.
        assume_yes: Answer yes to every relaunch question.
    """
    config = get_config(output)
    shell = ShellConsole(config.console)
    ui = UiExecutor()
    presenter = ConsolePresenter(output, assume_yes=assume_yes)
    handler = FailureHandler(shell, ui, presenter)
    try:
        yield Runtime(config=config, console=shell, ui=ui, presenter=presenter, handler=handler)
        ui.join()
    finally:
        abandoned = handler.close()
        if abandoned:
            _logger.warning("cli.relaunch_abandoned", count=abandoned)
        ui.shutdown()
