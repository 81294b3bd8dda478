"""Shared test doubles for fileexplorer tests.

Every double appends to a shared ``calls`` list so tests can assert the
global order of elevation, re-execution, follow-ups, and listener
callbacks.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from fileexplorer.console.exceptions import InsufficientPermissionsError
from fileexplorer.core.errors.codes import MessageId


class FakeConsole:
    """ConsoleProvider with a settable privileged flag."""

    def __init__(
        self,
        calls: list[str],
        privileged: bool = False,
        elevate_result: bool = True,
        elevate_error: Exception | None = None,
    ) -> None:
        self.calls = calls
        self.privileged = privileged
        self.elevate_result = elevate_result
        self.elevate_error = elevate_error

    def is_privileged(self) -> bool:
        return self.privileged

    def elevate(self) -> bool:
        self.calls.append("elevate")
        if self.elevate_error is not None:
            raise self.elevate_error
        if self.elevate_result:
            self.privileged = True
        return self.elevate_result


class FakeExecutable:
    """Executable returning queued results or raising queued failures.

    With an empty queue it returns ``result``.
    """

    def __init__(
        self,
        calls: list[str],
        name: str = "cmd",
        result: Any = "ok",
        outcomes: list[Any] | None = None,
    ) -> None:
        self.calls = calls
        self.name = name
        self.result = result
        self.outcomes = list(outcomes or [])

    def execute(self) -> Any:
        self.calls.append(f"execute:{self.name}")
        outcome = self.outcomes.pop(0) if self.outcomes else self.result
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakePresenter:
    """Presenter recording what would have been shown.

    With ``auto_answer`` set, questions are answered immediately; otherwise
    the test answers them with ``answer()``.
    """

    def __init__(
        self,
        auto_answer: bool | None = None,
        ask_error: Exception | None = None,
    ) -> None:
        self.auto_answer = auto_answer
        self.ask_error = ask_error
        self.toasts: list[str] = []
        self.dialogs: list[str] = []
        self.questions: list[str] = []
        self._pending: list[Callable[[bool], None]] = []
        self._lock = threading.Lock()

    def show_toast(self, message: str) -> None:
        self.toasts.append(message)

    def show_dialog(self, message: str) -> None:
        self.dialogs.append(message)

    def ask_yes_no(self, question: str, on_answer: Callable[[bool], None]) -> None:
        if self.ask_error is not None:
            raise self.ask_error
        self.questions.append(question)
        if self.auto_answer is not None:
            on_answer(self.auto_answer)
            return
        with self._lock:
            self._pending.append(on_answer)

    @property
    def pending_questions(self) -> int:
        with self._lock:
            return len(self._pending)

    def answer(self, value: bool) -> None:
        """Answer the oldest open question."""
        with self._lock:
            on_answer = self._pending.pop(0)
        on_answer(value)


class RecordingListener:
    """Relaunch listener writing its callbacks to ``calls``."""

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    def on_success(self) -> None:
        self.calls.append("on_success")

    def on_cancelled(self) -> None:
        self.calls.append("on_cancelled")

    def on_failed(self) -> None:
        self.calls.append("on_failed")


class AbandonRecordingListener(RecordingListener):
    """Recording listener that also wants abandon notifications."""

    def on_abandoned(self) -> None:
        self.calls.append("on_abandoned")


def permission_failure(
    *executables: Any,
    follow_up: Callable[[Any], None] | None = None,
) -> InsufficientPermissionsError:
    """An InsufficientPermissionsError carrying the given executables."""
    return InsufficientPermissionsError(
        "permission denied",
        executables=list(executables),
        question_id=MessageId.RELAUNCH_PRIVILEGED,
        follow_up=follow_up,
    )
