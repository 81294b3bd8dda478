"""Run command: execute a command, relaunching it with privileges on demand."""

from __future__ import annotations

import typer

from fileexplorer.console.exceptions import ConsoleError, attach_follow_up
from fileexplorer.console.shell import ShellCommand
from fileexplorer.core.logging import OperationContext, with_context

from ..helpers import EXIT_OK, OutcomeRecorder, open_runtime
from ..output import console


def run(
    command: list[str] = typer.Argument(..., help="Command and arguments (after --)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not show failure messages"),
    ask: bool = typer.Option(
        True,
        "--ask/--no-ask",
        help="Offer to relaunch with privileges when permission is denied",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to the relaunch question"),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", min=0.1, help="Command timeout in seconds"
    ),
) -> None:
    """Run COMMAND; print its output.

    Exit codes: 0 success, 1 failed, 2 relaunch declined.
    """
    recorder = OutcomeRecorder()

    def _print_output(output: object) -> None:
        text = str(output)
        if text:
            console.print(text, end="" if text.endswith("\n") else "\n", markup=False)

    with open_runtime(console, assume_yes=yes) as runtime:
        with with_context(OperationContext(operation="run", target=command[0])):
            try:
                output = ShellCommand(command, runtime.console, timeout=timeout).execute()
            except ConsoleError as e:
                attach_follow_up(e, _print_output)
                runtime.handler.handle(
                    e,
                    quiet=quiet or runtime.config.relaunch.quiet,
                    ask_user=ask and runtime.config.relaunch.ask_user,
                    listener=recorder,
                )
            else:
                _print_output(output)
                raise typer.Exit(EXIT_OK)

    raise typer.Exit(recorder.exit_code())
