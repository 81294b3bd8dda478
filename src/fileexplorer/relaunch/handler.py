"""Failure handler: the entry point for every captured failure.

Classifies the failure, then either hands it to the relaunch coordinator
(relaunchable failures, when the caller wants the user asked) or reports it
straight away. Failures handed in here never propagate further.
"""

from __future__ import annotations

from fileexplorer.console.base import ConsoleProvider
from fileexplorer.console.exceptions import is_relaunchable
from fileexplorer.core.errors.classifier import FailureClassifier
from fileexplorer.core.errors.models import Classification
from fileexplorer.core.logging import get_logger
from fileexplorer.relaunch.coordinator import RelaunchCoordinator
from fileexplorer.relaunch.listener import RelaunchListener, RelaunchOutcome, notify
from fileexplorer.relaunch.reporter import OutcomeReporter
from fileexplorer.ui.executor import UiExecutor, UiExecutorShutdownError
from fileexplorer.ui.presenter import Presenter

_logger = get_logger("relaunch.handler")


class FailureHandler:
    """Routes failures to the relaunch flow or to the reporter.

    Example:
        handler = FailureHandler(ShellConsole(), UiExecutor(), ConsolePresenter())
        try:
            command.execute()
        except ConsoleError as e:
            handler.handle(e, listener=my_listener)
    """

    def __init__(
        self,
        console: ConsoleProvider,
        ui: UiExecutor,
        presenter: Presenter,
        classifier: FailureClassifier | None = None,
    ) -> None:
        self.classifier = classifier or FailureClassifier()
        self.reporter = OutcomeReporter(ui, presenter)
        self.coordinator = RelaunchCoordinator(console, ui, presenter, handle=self.handle)
        self._ui = ui

    def handle(
        self,
        failure: BaseException,
        quiet: bool = False,
        ask_user: bool = True,
        listener: RelaunchListener | None = None,
    ) -> Classification:
        """Resolve a failure into a toast, a dialog, or a relaunch.

        Args:
            failure: The captured failure.
            quiet: Suppress user-visible messages (the failure is still logged).
            ask_user: Offer a privileged relaunch when the failure supports it.
            listener: Receives the relaunch outcome. Not called when the
                failure is only reported.

        Returns:
            The failure's classification.
        """
        classification = self.classifier.classify(failure)

        if ask_user and is_relaunchable(failure):
            _logger.info(
                "relaunch_requested",
                kind=classification.kind.value,
                failure_type=type(failure).__name__,
            )
            try:
                self._ui.run_on_ui_thread(self.coordinator.relaunch, failure, quiet, listener)
            except UiExecutorShutdownError:
                _logger.warning("relaunch.ui_unavailable", kind=classification.kind.value)
                notify(listener, RelaunchOutcome.ABANDONED)
            return classification

        try:
            self.reporter.report(failure, classification, quiet)
        except UiExecutorShutdownError:
            _logger.warning("reporter.ui_unavailable", kind=classification.kind.value)
        return classification

    def close(self) -> int:
        """Abandon relaunches still waiting for an answer.

        Returns:
            Number of abandoned relaunches.
        """
        for session in self.coordinator.awaiting:
            _logger.info(
                "relaunch.abandoning",
                failure_type=type(session.failure).__name__,
                state=session.state.value,
            )
        return self.coordinator.abandon_pending()
