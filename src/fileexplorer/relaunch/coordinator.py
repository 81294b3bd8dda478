"""Relaunch coordinator.

Drives one retry-with-escalation sequence for a relaunchable failure:

1. START: an InsufficientPermissionsError raised while the console is
   already privileged cannot be fixed by elevating, so it is reported and
   the sequence fails.
2. AWAITING_CONFIRMATION: the listener learns the original attempt failed
   and the user is asked whether to relaunch. No timeout.
3. PREPARING: the console is elevated when the failure needs privileges.
   Failing to elevate is not fatal; the commands are re-run anyway.
4. REEXECUTING: commands re-run in their original order, one at a time,
   each result handed to the follow-up. The first failure ends the
   sequence; a failure of the same type as the original is handled quietly
   and without asking again so the user never loops on the same prompt.

Every step runs on the UI thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fileexplorer.console.base import ConsoleProvider
from fileexplorer.console.exceptions import InsufficientPermissionsError
from fileexplorer.core.logging import get_logger
from fileexplorer.core.messages import get_message
from fileexplorer.relaunch.listener import RelaunchListener, RelaunchOutcome, notify
from fileexplorer.ui.executor import UiExecutor, UiExecutorShutdownError
from fileexplorer.ui.presenter import Presenter

_logger = get_logger("relaunch.coordinator")

# handle(failure, quiet, ask_user, listener)
HandleCallback = Callable[[BaseException, bool, bool, "RelaunchListener | None"], Any]


class RelaunchState(str, Enum):
    """States of a relaunch sequence."""

    START = "start"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PREPARING = "preparing"
    REEXECUTING = "reexecuting"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAILED = "failed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({
    RelaunchState.SUCCEEDED,
    RelaunchState.CANCELLED,
    RelaunchState.FAILED,
    RelaunchState.ABANDONED,
})


@dataclass
class RelaunchSession:
    """One relaunch sequence and the states it went through."""

    failure: BaseException
    quiet: bool
    listener: RelaunchListener | None
    state: RelaunchState = RelaunchState.START
    history: list[RelaunchState] = field(default_factory=lambda: [RelaunchState.START])
    reexecuted: int = 0
    """Number of commands that were re-run successfully."""

    elevated: bool | None = None
    """Result of the elevation attempt, None when none was needed."""

    def transition(self, state: RelaunchState) -> None:
        self.state = state
        self.history.append(state)


class RelaunchCoordinator:
    """Runs relaunch sequences against a console provider.

    The coordinator borrows the console and the failure's commands for the
    duration of a sequence and keeps only sessions still waiting for an
    answer.
    """

    def __init__(
        self,
        console: ConsoleProvider,
        ui: UiExecutor,
        presenter: Presenter,
        handle: HandleCallback,
    ) -> None:
        self._console = console
        self._ui = ui
        self._presenter = presenter
        self._handle = handle
        self._lock = threading.Lock()
        self._awaiting: dict[int, RelaunchSession] = {}

    @property
    def awaiting(self) -> list[RelaunchSession]:
        """Sessions currently waiting for the user's answer."""
        with self._lock:
            return list(self._awaiting.values())

    def relaunch(
        self,
        failure: BaseException,
        quiet: bool = False,
        listener: RelaunchListener | None = None,
    ) -> RelaunchSession | None:
        """Start a relaunch sequence for a relaunchable failure.

        A failure is relaunched once; handing it in again reports it without
        asking and tells the listener the operation failed.

        Returns:
            The session, or None if this failure was already relaunched.
        """
        if getattr(failure, "consumed", False):
            _logger.warning("relaunch.already_consumed", failure_type=type(failure).__name__)
            self._handle(failure, quiet, False, None)
            notify(listener, RelaunchOutcome.FAILED)
            return None
        failure.consumed = True  # type: ignore[attr-defined]

        session = RelaunchSession(failure=failure, quiet=quiet, listener=listener)

        if isinstance(failure, InsufficientPermissionsError) and self._is_privileged():
            _logger.info("relaunch.already_privileged")
            self._handle(failure, quiet, False, None)
            self._finish(session, RelaunchState.FAILED, RelaunchOutcome.FAILED)
            return session

        # The original attempt did fail, whatever the user answers
        notify(listener, RelaunchOutcome.FAILED)

        session.transition(RelaunchState.AWAITING_CONFIRMATION)
        with self._lock:
            self._awaiting[id(session)] = session

        question = get_message(getattr(failure, "question_id", ""))
        _logger.info(
            "relaunch.awaiting_confirmation",
            failure_type=type(failure).__name__,
            commands=len(getattr(failure, "executables", ())),
        )
        try:
            self._presenter.ask_yes_no(
                question, lambda answer: self._schedule_answer(session, answer)
            )
        except Exception:
            _logger.exception("relaunch.prompt_failed")
            self._abandon(session)
        return session

    def _schedule_answer(self, session: RelaunchSession, answer: bool) -> None:
        try:
            self._ui.run_on_ui_thread(self.on_answer, session, answer)
        except UiExecutorShutdownError:
            _logger.warning("relaunch.answer_after_shutdown", answer=answer)

    def on_answer(self, session: RelaunchSession, answer: bool) -> None:
        """Continue a session with the user's answer (runs on the UI thread)."""
        with self._lock:
            pending = self._awaiting.pop(id(session), None)
        if pending is None:
            _logger.info("relaunch.answer_ignored", state=session.state.value)
            return

        if not answer:
            _logger.info("relaunch.declined")
            self._finish(session, RelaunchState.CANCELLED, RelaunchOutcome.CANCELLED)
            return

        session.transition(RelaunchState.PREPARING)
        self._prepare(session)

        session.transition(RelaunchState.REEXECUTING)
        self._reexecute(session)

    def _prepare(self, session: RelaunchSession) -> None:
        if not isinstance(session.failure, InsufficientPermissionsError):
            return
        try:
            session.elevated = self._console.elevate()
        except Exception:
            _logger.exception("relaunch.elevate_failed")
            session.elevated = False
        if not session.elevated:
            _logger.warning("relaunch.not_elevated")

    def _reexecute(self, session: RelaunchSession) -> None:
        failure = session.failure
        follow_up = getattr(failure, "follow_up", None)
        for executable in list(getattr(failure, "executables", ())):
            try:
                result = executable.execute()
                if follow_up is not None:
                    follow_up(result)
            except Exception as e:
                same_type = type(e) is type(failure)
                _logger.warning(
                    "relaunch.reexecution_failed",
                    failure_type=type(e).__name__,
                    same_type=same_type,
                    completed=session.reexecuted,
                )
                if same_type:
                    self._handle(e, True, False, None)
                else:
                    self._handle(e, session.quiet, True, None)
                self._finish(session, RelaunchState.FAILED, RelaunchOutcome.FAILED)
                return
            session.reexecuted += 1

        self._finish(session, RelaunchState.SUCCEEDED, RelaunchOutcome.SUCCESS)

    def abandon_pending(self) -> int:
        """Abandon every session still waiting for an answer.

        Called when the hosting UI is torn down. Listeners implementing
        ``on_abandoned`` are notified; a late answer is ignored.

        Returns:
            Number of sessions abandoned.
        """
        with self._lock:
            sessions = list(self._awaiting.values())
            self._awaiting.clear()
        for session in sessions:
            self._finish(session, RelaunchState.ABANDONED, RelaunchOutcome.ABANDONED)
        return len(sessions)

    def _abandon(self, session: RelaunchSession) -> None:
        with self._lock:
            self._awaiting.pop(id(session), None)
        self._finish(session, RelaunchState.ABANDONED, RelaunchOutcome.ABANDONED)

    def _finish(
        self,
        session: RelaunchSession,
        state: RelaunchState,
        outcome: RelaunchOutcome,
    ) -> None:
        session.transition(state)
        _logger.info(
            "relaunch.finished",
            state=state.value,
            reexecuted=session.reexecuted,
            elevated=session.elevated,
        )
        notify(session.listener, outcome)

    def _is_privileged(self) -> bool:
        try:
            return bool(self._console.is_privileged())
        except Exception:
            _logger.warning("relaunch.privilege_check_failed")
            return False
