"""Presenters: how messages and questions reach the user.

The relaunch machinery talks to a Presenter and never to a widget toolkit.
ConsolePresenter renders to a terminal with rich. All presenter methods are
called on the UI thread.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

AnswerCallback = Callable[[bool], None]


@runtime_checkable
class Presenter(Protocol):
    """User-facing surface for failures and confirmation questions."""

    def show_toast(self, message: str) -> None:
        """Show a short transient notification."""
        ...

    def show_dialog(self, message: str) -> None:
        """Show a dismissible modal error message."""
        ...

    def ask_yes_no(self, question: str, on_answer: AnswerCallback) -> None:
        """Ask a yes/no question; ``on_answer`` receives the answer later.

        Implementations must not block waiting for the answer unless the
        surface itself is blocking (a terminal prompt).
        """
        ...


class ConsolePresenter:
    """Terminal presenter.

    Toasts are one dim line, dialogs are a red panel, questions use
    ``rich.prompt.Confirm``. End of input or Ctrl-C on a question counts as
    "No".
    """

    def __init__(self, console: Console | None = None, assume_yes: bool = False) -> None:
        self.console = console or Console(stderr=True)
        self.assume_yes = assume_yes

    def show_toast(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_dialog(self, message: str) -> None:
        self.console.print(Panel(message, title="Error", border_style="red", expand=False))

    def ask_yes_no(self, question: str, on_answer: AnswerCallback) -> None:
        if self.assume_yes:
            self.console.print(f"{question} [dim](yes)[/dim]")
            on_answer(True)
            return
        try:
            answer = Confirm.ask(question, console=self.console, default=False)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            answer = False
        on_answer(answer)
